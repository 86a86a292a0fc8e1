import os
import shutil
import tempfile
import threading
from typing import Annotated

from fastapi import BackgroundTasks, FastAPI, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel

from locator import version
from locator.constants.constants import DEFAULT_STRATEGY, LOCATE_TIMER
from locator.errors import ConfigurationError, ResourceOpenError
from locator.models.locator import LocatorInput, LocatorOutput
from locator.seed.seeder import SeedStrategy
from locator.seedLocator.seedLocator import ASeedLocator, SeedLocator
from locator.timer.progress import ProgressMonitor, ProgressSnapshot


class ProgressResponse(BaseModel):
    completed: int
    total: int
    occurrences: int
    percent: int
    locateSeconds: float


app = FastAPI(title="gcsa_locate", version=version)

# each run owns its monitor; /locator/progress reads the most recently started one
_latestMonitor : ProgressMonitor = ProgressMonitor()
_monitorLock = threading.Lock()


def newRunMonitor() -> ProgressMonitor:
    global _latestMonitor
    runMonitor = ProgressMonitor()
    with _monitorLock:
        _latestMonitor = runMonitor
    return runMonitor


def latestMonitor() -> ProgressMonitor:
    with _monitorLock:
        return _latestMonitor


@app.get("/")
def root():
    return {"message": "gcsa_locate", "version": version}


@app.get("/locator/progress", response_model=ProgressResponse)
def progress():
    monitor : ProgressMonitor = latestMonitor()
    snapshot : ProgressSnapshot = monitor.snapshot()
    return ProgressResponse(
        completed=snapshot.completed,
        total=snapshot.total,
        occurrences=snapshot.occurrences,
        percent=snapshot.percent(),
        locateSeconds=monitor.elapsed(LOCATE_TIMER),
    )


# sync endpoint: runs in the threadpool so /locator/progress stays responsive
@app.post("/locator/locateSeeds")
def locateSeeds(
    sequences: UploadFile,
    index: UploadFile,
    seedLength: Annotated[int, Form()],
    background_tasks: BackgroundTasks,
    strategy: Annotated[str, Form()] = DEFAULT_STRATEGY,
    ):
    try:
        seedStrategy = SeedStrategy(strategy)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"unknown seeding strategy '{strategy}'")

    outputFileName : str = "occurrences.tsv"
    outputFolderLocation : str = tempfile.mkdtemp(prefix="gcsa_locate_")
    outputFileLocation : str = os.path.join(outputFolderLocation, outputFileName)

    locatorInput = LocatorInput(
        sequenceFile = sequences.file,
        indexFile    = index.file,
        outputLocation = outputFileLocation,
        seedLength   = seedLength,
        strategy     = seedStrategy,
    )

    seedLocator : ASeedLocator = SeedLocator(monitor=newRunMonitor())
    try:
        locatorOutput : LocatorOutput = seedLocator.locateSeeds(locatorInput)
    except ConfigurationError as e:
        shutil.rmtree(outputFolderLocation)
        raise HTTPException(status_code=422, detail=str(e))
    except ResourceOpenError as e:
        shutil.rmtree(outputFolderLocation)
        raise HTTPException(status_code=400, detail=str(e))

    headers = {
        "Located-Occurrences-Count": str(locatorOutput.numberOfOccurrences),
        "Access-Control-Expose-Headers": "Located-Occurrences-Count"
    }

    background_tasks.add_task(shutil.rmtree, outputFolderLocation)
    return FileResponse(
        path=outputFileLocation,
        filename=outputFileName,
        headers=headers,
    )
