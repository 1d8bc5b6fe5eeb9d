"""Data validation utilities using pandera."""

import pandera as pa
import pandas as pd
from pandera import DataFrameSchema

type ValidationResult = dict[str, str | bool | list[str]]


def validate_dataframe(df: pd.DataFrame, schema: DataFrameSchema) -> ValidationResult:
    """Validate a DataFrame against a pandera schema, collecting all failures."""
    try:
        schema.validate(df, lazy=True)
        return {"valid": True, "status": "ok", "errors": []}
    except pa.errors.SchemaErrors as e:
        errors = []
        for _, row in e.failure_cases.iterrows():
            match row.to_dict():
                case {"column": col, "check": check, "failure_case": val}:
                    errors.append(f"Column '{col}' failed check '{check}': {val}")
                case failure:
                    errors.append(f"Validation failure: {failure}")
        return {"valid": False, "status": "error", "errors": errors}
