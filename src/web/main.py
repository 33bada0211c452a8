import logging
import os
from typing import Any, List, Optional

import numpy as np
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

try:
    from ..analysis.majority import (
        BoyerMooreMajorityVote,
        Found,
        InvalidInputError,
        collect_positions,
    )
    from ..data.database import RESULTS_TABLE, BenchmarkDatabase
    from ..data.generators import InputType
except ImportError:
    from analysis.majority import (
        BoyerMooreMajorityVote,
        Found,
        InvalidInputError,
        collect_positions,
    )
    from data.database import RESULTS_TABLE, BenchmarkDatabase
    from data.generators import InputType

logger = logging.getLogger(__name__)

DATABASE_ENV_VAR = "MAJORITY_DATABASE_PATH"

app = FastAPI(
    title="Majority Vote Analyzer",
    description="Boyer-Moore majority detection and benchmark results",
)

# Set by set_database_path(); falls back to the environment variable
db_path = None


def convert_numpy_types(obj: Any) -> Any:
    """Convert numpy types to native Python types for JSON serialization."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {k: convert_numpy_types(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    else:
        return obj


class MajorityRequest(BaseModel):
    sequence: Optional[List[Any]] = None
    optimized: bool = False
    positions: bool = False


@app.on_event("startup")
async def startup_event():
    logger.info("Starting Majority Vote Analyzer")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Majority Vote Analyzer")


def get_database() -> BenchmarkDatabase:
    """
    Get a read-only results database.
    Uses the configured path, then the MAJORITY_DATABASE_PATH environment variable.
    """
    path = db_path or os.environ.get(DATABASE_ENV_VAR)
    if not path:
        raise HTTPException(status_code=500, detail="Database not configured")
    return BenchmarkDatabase(path, read_only=True)


def set_database_path(path: str):
    """Set the database path for the application and check it is readable."""
    global db_path
    db_path = path
    os.environ[DATABASE_ENV_VAR] = path
    logger.info(f"Database path set to: {path}")

    try:
        with BenchmarkDatabase(path, read_only=True) as test_db:
            test_db.table_exists(RESULTS_TABLE)
        logger.info("Database connection test successful")
    except Exception as e:
        logger.error(f"Database connection test failed: {e}")
        raise


def require_results(database: BenchmarkDatabase):
    """Raise 400 unless the database file exists and holds stored results."""
    try:
        loaded = database.table_exists(RESULTS_TABLE)
    except FileNotFoundError:
        loaded = False
    if not loaded:
        raise HTTPException(status_code=400, detail="No data loaded")


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/api/input-types")
async def get_input_types():
    """List the synthetic input shapes used by the benchmark."""
    return [
        {
            "choice": input_type.value,
            "name": input_type.name,
            "label": input_type.label,
            "description": input_type.description,
        }
        for input_type in InputType
    ]


@app.post("/api/majority")
def find_majority(request: MajorityRequest):
    """Detect the majority element of a posted sequence."""
    algorithm = BoyerMooreMajorityVote()
    try:
        outcome, metrics = algorithm.detect(request.sequence, optimized=request.optimized)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    found = isinstance(outcome, Found)
    response = {
        "found": found,
        "element": outcome.element if found else None,
        "count": outcome.count if found else None,
        "positions": None,
        "metrics": metrics.to_dict(),
    }

    if found and request.positions:
        positions = list(collect_positions(request.sequence, outcome.element))
        response["positions"] = positions
        response["count"] = len(positions)

    return response


@app.get("/api/benchmarks")
async def get_benchmarks(input_type: Optional[str] = None, run_id: Optional[str] = None):
    """Stored benchmark rows, optionally filtered by input type label or run."""
    with get_database() as database:
        require_results(database)

        if input_type:
            try:
                input_type = InputType.from_label(input_type).label
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        results = database.load_results(input_type=input_type, run_id=run_id)
        results["recorded_at"] = results["recorded_at"].astype(str)
        return convert_numpy_types(results.to_dict("records"))


@app.get("/api/benchmarks/runs")
async def get_benchmark_runs():
    """Stored benchmark runs."""
    with get_database() as database:
        require_results(database)

        runs = database.list_runs()
        runs["recorded_at"] = runs["recorded_at"].astype(str)
        return convert_numpy_types(runs.to_dict("records"))
