from dataclasses import asdict, fields, is_dataclass


class SheetsResourceBase():
    """
    Intended to be subclassed by a dataclass but isnt actually a dataclass.
    Subclasses translate between themselves and the raw dicts the API
    client sends and receives.
    """
    def to_base(self) -> dict:
        """
        Dict representation as needed by the API client.
        Call fixup() first so nested fields are in their final form.
        """
        self.fixup()
        return asdict(self)

    def fixup(self) -> None:
        """
        notify a subclass to do any field adjustments
        """
        pass

    @classmethod
    def from_response(cls, data: dict|None):
        """
        Build from a response dict, ignoring keys the dataclass does not
        model.  The API adds fields over time and those should not break
        construction.
        """
        data = dict(data or {})
        if is_dataclass(cls):
            known = {f.name for f in fields(cls) if f.init}
            data = {k: v for k, v in data.items() if k in known}
        return cls(**data)
