from typing import List

Dataset = List[List[str]]

DELIMITER = ","
SAMPLE_ROWS = 5


class TabularParser:
    """Plain delimiter splitting. No quoting, no column-count enforcement."""
    __slots__ = ()

    @staticmethod
    def decode(raw: bytes) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw.decode("latin1")

    @staticmethod
    def parse(text: str) -> Dataset:
        # One row per "\n"; a trailing newline yields a final [""] row.
        return [line.split(DELIMITER) for line in text.split("\n")]

    @staticmethod
    def sample(data: Dataset, n: int = SAMPLE_ROWS) -> Dataset:
        return data[:n]

    @classmethod
    def sample_text(cls, data: Dataset, n: int = SAMPLE_ROWS) -> str:
        return cls.serialize(cls.sample(data, n))

    @staticmethod
    def serialize(data: Dataset) -> str:
        return "\n".join(DELIMITER.join(row) for row in data)
