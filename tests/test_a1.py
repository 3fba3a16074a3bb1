import pytest

from eventsheets.sheets.a1 import GoogleSheetsA1Notation, quote_sheet, unquote_sheet

def test_valid_bounded():
    a1 = GoogleSheetsA1Notation("test!C4:BX2")
    assert(a1)
    assert(a1.sheet == "test")
    assert(a1.start_col == 'C')
    assert(a1.end_col == 'BX')
    assert(a1.start_row == 4)
    assert(a1.end_row == 2)
    assert(a1.start_col_int == 3)
    assert(a1.end_col_int == 76)
    assert(a1.num_rows == 3)
    assert(len(a1) == 3 * 74)

def test_single_cell():
    a1 = GoogleSheetsA1Notation("'Acme Corp'!A3")
    assert(a1)
    assert(a1.sheet == "Acme Corp")
    assert(a1.start_col == 'A' and a1.end_col == 'A')
    assert(a1.start_row == 3 and a1.end_row == 3)
    assert(a1.bounded)
    assert(len(a1) == 1)

def test_unbounded():
    a1 = GoogleSheetsA1Notation("test!B:Z")
    assert(a1)
    assert(a1.start_col == 'B')
    assert(a1.end_col == 'Z')
    assert(a1.start_row == 0)
    assert(a1.end_row == 0)
    assert(a1.cols_bounded)
    assert(not a1.rows_bounded)
    assert(len(a1) == 0)

    a1 = GoogleSheetsA1Notation("test!A3:3")
    assert(a1)
    assert(a1.rows_bounded)
    assert(not a1.cols_bounded)

def test_valid_titles():
    a1 = GoogleSheetsA1Notation("companies")
    assert(a1)
    assert(a1.sheet == "companies")
    assert(a1.start_col == "")
    assert(a1.start_row == 0)
    assert(a1.end_col == "")
    assert(a1.end_row == 0)

    a1 = GoogleSheetsA1Notation("'Acme Corp'")
    assert(a1)
    assert(a1.sheet == "Acme Corp")

    a1 = GoogleSheetsA1Notation("test!A1:C5")
    a1.sheet = "this is a test"
    assert(a1.sheet == "this is a test")
    assert(a1.a1 == "'this is a test'!A1:C5")

def test_quoting():
    assert(quote_sheet("companies") == "companies")
    assert(quote_sheet("Acme Corp") == "'Acme Corp'")
    assert(quote_sheet("O'Neil Ltd") == "'O''Neil Ltd'")
    # would otherwise read as a cell reference
    assert(quote_sheet("AB12") == "'AB12'")
    assert(quote_sheet("R1C1") == "'R1C1'")
    assert(quote_sheet("r12c3") == "'r12c3'")
    assert(quote_sheet("Roster") == "Roster")
    assert(quote_sheet("2026 Events") == "'2026 Events'")
    assert(unquote_sheet("'O''Neil Ltd'") == "O'Neil Ltd")
    assert(unquote_sheet("companies") == "companies")

    a1 = GoogleSheetsA1Notation.cell("O'Neil Ltd", 'A', 1)
    assert(a1)
    assert(a1.a1 == "'O''Neil Ltd'!A1")
    assert(a1.sheet == "O'Neil Ltd")

def test_invalid():
    a1 = GoogleSheetsA1Notation()
    assert(not a1)
    assert(str(a1) == "<invalid>")
    a1 = GoogleSheetsA1Notation("test!:D3")
    assert(not a1)
    a1 = GoogleSheetsA1Notation("test:")
    assert(not a1)
    a1 = GoogleSheetsA1Notation("test!F2:A3")
    assert(not a1)
    a1 = GoogleSheetsA1Notation("test!")
    assert(not a1)
    a1 = GoogleSheetsA1Notation("A")
    assert(not a1)

    a1 = GoogleSheetsA1Notation("test!A1")
    with pytest.raises(ValueError):
        a1.a1 = "test!F2:A3"
    assert(a1.a1 == "test!A1")

def test_columns():
    assert(GoogleSheetsA1Notation.col_to_int('A') == 1)
    assert(GoogleSheetsA1Notation.col_to_int('Z') == 26)
    assert(GoogleSheetsA1Notation.col_to_int('AA') == 27)
    assert(GoogleSheetsA1Notation.col_to_int('ZZZ') == 18278)
    assert(GoogleSheetsA1Notation.col_to_int('A1') == 0)
    assert(GoogleSheetsA1Notation.int_to_col(1) == 'A')
    assert(GoogleSheetsA1Notation.int_to_col(76) == 'BX')
    assert(GoogleSheetsA1Notation.int_to_col(703) == 'AAA')
    assert(GoogleSheetsA1Notation.int_to_col(0) == '')
    assert(GoogleSheetsA1Notation.int_to_col(18279) == '')

def test_generate():
    assert(GoogleSheetsA1Notation.generate_a1("Acme Corp") == "'Acme Corp'")
    assert(GoogleSheetsA1Notation.generate_a1("test", "A", 0, "C", 0) == "test!A:C")
    assert(GoogleSheetsA1Notation.generate_a1("test", 1, 1, 3, 5) == "test!A1:C5")
    assert(GoogleSheetsA1Notation.generate_a1("", "B", 2) == "B2")
    assert(GoogleSheetsA1Notation.generate_a1("test", "", 0, "C", 5) == "")
    assert(GoogleSheetsA1Notation.generate_a1("test", "a1", 1) == "")

    assert(GoogleSheetsA1Notation.cell("companies", 1, 3).a1 == "companies!A3")
    assert(GoogleSheetsA1Notation.cell("Acme Corp", 'A', 7).a1 == "'Acme Corp'!A7")
    assert(GoogleSheetsA1Notation.row_range("test", 3).a1 == "test!A3:3")
    assert(GoogleSheetsA1Notation.row_range("test", 3, 5).a1 == "test!A3:5")

def test_specials():
    a1 = GoogleSheetsA1Notation("test!C4:AB25")
    a1 += 2
    assert(a1.a1 == "test!C4:AB27")
    assert(a1.end_row == 27)
    a1 -= 5
    assert(a1.a1 == "test!C4:AB22")
    assert(a1.end_row == 22)
    assert(not a1.reduce_rows(30))
    assert(a1.a1 == "test!C4:AB22")

    assert(a1 == "test!C4:AB22")
    assert(a1 == GoogleSheetsA1Notation("test!C4:AB22"))
    assert(len({a1, GoogleSheetsA1Notation("test!C4:AB22")}) == 1)

    a1 = GoogleSheetsA1Notation('test!C4:AL22')
    compare = GoogleSheetsA1Notation("test!E7:Z22")
    assert(compare in a1)
    assert("test!B7:Z22" not in a1)
    assert("test!E7:Z23" not in a1)

    compare.sheet = "other"
    assert(compare.a1 == "other!E7:Z22")
    assert(compare not in a1)

    a1 = GoogleSheetsA1Notation('test!B:Z')
    assert("test!C4:D9" in a1)
    assert("test!4:9" not in a1)
