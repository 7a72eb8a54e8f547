import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from sanajahti.settings import settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("sanajahti")

# Populated at startup, replaced when MIN_WORD_LENGTH changes
_index = None


def _load_index():
    global _index
    from sanajahti.wordlist import load_index

    logger.info("Loading wordlist from %s (min_length=%d)", settings.WORDLIST_PATH, settings.MIN_WORD_LENGTH)
    _index = load_index(settings.WORDLIST_PATH, settings.MIN_WORD_LENGTH)
    logger.info("Index loaded: %d words", len(_index))


def create_app() -> FastAPI:
    from contextlib import asynccontextmanager

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        global _index
        if settings.DEBUG:
            logger.setLevel(logging.DEBUG)
        _load_index()
        yield
        _index = None

    application = FastAPI(title="Sanajahti Solver", lifespan=lifespan)

    @application.get("/health")
    async def health():
        return {
            "status": "ok",
            "index_loaded": _index is not None,
            "word_count": len(_index) if _index is not None else 0,
        }

    @application.post("/solve")
    async def solve(request: Request):
        from sanajahti.metrics import StageTimer
        from sanajahti.solver import Grid, InvalidGrid, SolveTimeout, find_words, rank_words

        if _index is None:
            raise HTTPException(503, "Wordlist not loaded")

        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict) or "grid" not in body:
            raise HTTPException(400, "Missing 'grid' field")

        timer = StageTimer()

        with timer.stage("parse"):
            try:
                grid = Grid.parse(body["grid"], settings.GRID_SIZE, normalize=True)
            except InvalidGrid as e:
                raise HTTPException(400, str(e))

        logger.info("Grid %dx%d: %s", grid.size, grid.size, grid)

        with timer.stage("solve"):
            try:
                paths = find_words(
                    grid, _index,
                    workers=settings.SEARCH_WORKERS,
                    timeout=settings.SOLVE_TIMEOUT or None,
                )
            except SolveTimeout as e:
                logger.warning("Solve timed out: %s", e)
                raise HTTPException(503, f"Solve exceeded time budget: {e}")

        with timer.stage("rank"):
            words = rank_words(paths, settings.MAX_RESULTS)

        logger.info("Found %d words (returning top %d)", len(paths), len(words))

        return JSONResponse({
            "grid_size": grid.size,
            "board": grid.rows(),
            "words": words,
            "word_count": len(words),
            "total_found": len(paths),
            "paths": {w: [list(pos) for pos in paths[w]] for w in words},
            "processing_time": timer.total_ms,
            "stage_timings": timer.summary(),
        })

    @application.get("/api/settings")
    async def api_get_settings():
        from sanajahti.settings import get_editable_settings, EDITABLE_FIELDS
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        from sanajahti.settings import update_settings, get_editable_settings
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Settings body must be a JSON object")
        previous_min_length = settings.MIN_WORD_LENGTH
        errors = update_settings(settings, **body)
        if settings.MIN_WORD_LENGTH != previous_min_length:
            # _index is only replaced once the new one is built
            try:
                _load_index()
            except (OSError, ValueError) as e:
                logger.error("Wordlist reload failed, keeping MIN_WORD_LENGTH=%d: %s", previous_min_length, e)
                settings.MIN_WORD_LENGTH = previous_min_length
                errors["MIN_WORD_LENGTH"] = f"could not reload wordlist: {e}"
        logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


app = create_app()
