import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from financeflow_categorizer.api.routes import categorize, history, imports, rules
from financeflow_categorizer.core import settings
from financeflow_categorizer.logger import get_logger, setup_logging
from financeflow_categorizer.manager import CategorizationEngine
from financeflow_categorizer.services.categorization import CategorizationPipeline
from financeflow_categorizer.stores.history import HistoryIndex
from financeflow_categorizer.stores.persistence import JsonFilePersistence
from financeflow_categorizer.stores.rules import RuleStore

logger = get_logger(__name__)


def build_engine(data_dir: str, seed_defaults: bool = True) -> CategorizationEngine:
    engine_settings = settings.load_engine_settings()
    rule_store = RuleStore(JsonFilePersistence(os.path.join(data_dir, settings.RULES_FILENAME)))
    if seed_defaults:
        rule_store.seed_defaults()
    history = HistoryIndex(
        JsonFilePersistence(os.path.join(data_dir, settings.HISTORY_FILENAME)),
        settings=engine_settings,
    )
    logger.info("[ENGINE] Loaded %d rules and %d history patterns.", len(rule_store), len(history))
    return CategorizationEngine(rule_store, history, settings=engine_settings)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        engine = build_engine(settings.DATA_DIR, seed_defaults=settings.SEED_DEFAULT_RULES)
        app.state.engine = engine
        app.state.pipeline = CategorizationPipeline(engine)

        logger.info("Services initialized.")
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="FinanceFlow Categorizer", lifespan=lifespan)

    app.include_router(categorize.router)
    app.include_router(rules.router)
    app.include_router(history.router)
    app.include_router(imports.router)

    return app


app = create_app()
