from sqlalchemy import Integer, cast, func
from sqlalchemy.orm import Session


def next_code(db: Session, column, prefix: str, width: int = 4, start: int = 0) -> str:
    """
    Next sequential business code such as TRX-00001 or SO-0001.

    The maximum is taken over the numeric suffix, so numbering keeps going
    once a code outgrows ``width`` (TRF-9999 is followed by TRF-10000, then
    TRF-10001). Pending rows are flushed first because the session does not
    autoflush.
    """
    db.flush()
    suffix = cast(func.substr(column, len(prefix) + 2), Integer)
    last = db.query(func.max(suffix)).filter(column.like(f"{prefix}-%")).scalar()

    number = max(last or 0, start)
    return f"{prefix}-{number + 1:0{width}d}"
