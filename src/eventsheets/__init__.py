"""
Event registration backed by a Google Sheets spreadsheet.

Companies create events and applicants register for them through a public
form.  There is no database: one spreadsheet holds everything, a sheet per
company with a table per event, plus a sheet listing the companies.

The sheets package wraps the Google Sheets API client (dataclasses for the
request and response structs, A1 notation, the table-within-a-sheet layout),
events holds the application operations and server exposes them over HTTP.
"""
