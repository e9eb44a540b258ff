import base64
import hashlib
import tempfile
from pathlib import Path

from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from .errors import EmptyDocumentError, RowTooShortError
from .models import SubstituteResponse, HealthResponse
from .rules import SHORT_ROW_POLICIES, SHORT_ROWS_ERROR
from .substitute import substitute

app = FastAPI(
    title="csv-substitutor",
    description="Replace matching values in one named column of a CSV file",
    version="0.1.0",
)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/substitute", response_model=SubstituteResponse)
def substitute_csv(
    file: UploadFile = File(...),
    column_heading: str = Form(...),
    value_to_replace: str = Form(""),
    new_value: str = Form(""),
    short_rows: str = Form(SHORT_ROWS_ERROR),
):
    if not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")
    if short_rows not in SHORT_ROW_POLICIES:
        raise HTTPException(status_code=422, detail=f"short_rows must be one of {list(SHORT_ROW_POLICIES)}")

    raw = file.file.read()

    with tempfile.TemporaryDirectory() as tmp:
        input_path = Path(tmp) / "input.csv"
        output_path = Path(tmp) / "output.csv"
        input_path.write_bytes(raw)

        try:
            result = substitute(
                input_path,
                column_heading,
                value_to_replace,
                new_value,
                output_path,
                encoding=None,
                short_rows=short_rows,
            )
        except (EmptyDocumentError, RowTooShortError, UnicodeDecodeError, UnicodeEncodeError) as e:
            raise HTTPException(status_code=422, detail=str(e))

        if not result.output_written:
            return {"substituted_csv": None, "result": result}

        out = output_path.read_bytes()

    return {
        "substituted_csv": {
            "sha256": _sha256_hex(out),
            "encoding": result.encoding,
            "content_b64": base64.b64encode(out).decode("ascii"),
        },
        "result": result,
    }
