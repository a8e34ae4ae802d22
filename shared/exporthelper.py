from typing import List, Dict, Optional
from fastapi.responses import StreamingResponse
from io import StringIO
import pandas as pd


def build_export_frame(
    data: List[Dict],
    column_map: Optional[Dict[str, str]] = None,
) -> pd.DataFrame:
    """
    Shape a list of dictionaries into a DataFrame with friendly headers.

    Args:
        data: List of dictionaries (each dict = row)
        column_map: Mapping of data keys -> friendly column names, also
            fixes the column order
    """
    # Fill missing keys to avoid KeyError
    if column_map:
        for row in data:
            for key in column_map.keys():
                row.setdefault(key, None)

    df = pd.DataFrame(data, columns=list(column_map.keys()) if column_map else None)

    if column_map:
        df = df.rename(columns=column_map)

    return df


def export_to_csv(
    data: List[Dict],
    filename: str = "export.csv",
    column_map: Optional[Dict[str, str]] = None,
) -> StreamingResponse:
    df = build_export_frame(data, column_map)

    output = StringIO()
    df.to_csv(output, index=False)
    output.seek(0)

    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"'
    }

    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers=headers
    )
