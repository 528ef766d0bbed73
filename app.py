"""
app.py
──────
GIS Partial-Discharge Monitor: application entry point.

Startup sequence:
  1. Configure logging
  2. Initialize SQLite DB and seed with the site catalogue and simulated history
  3. Create Dash app with DARKLY bootstrap theme
  4. Register all callbacks
  5. Run dev server (or expose `server` for gunicorn in production)
"""
import logging

import dash
import dash_bootstrap_components as dbc

from config.settings import settings
from src.data.store import initialize_db
from src.layout.main import create_layout

# ── 1. Logging ────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger("pd.app")

# ── 2. Seed database on startup ───────────────────────────────────────────────
logger.info("Initializing database (%s)", settings.DATABASE_URL)
initialize_db()
logger.info("Database ready.")

# ── 3. Dash app ───────────────────────────────────────────────────────────────
app = dash.Dash(
    __name__,
    external_stylesheets=[dbc.themes.DARKLY],
    suppress_callback_exceptions=True,
    meta_tags=[{"name": "viewport", "content": "width=device-width, initial-scale=1"}],
    title="GIS PD Monitor",
)

server = app.server  # gunicorn entry point
app.layout = create_layout()

# ── 4. Register callbacks ─────────────────────────────────────────────────────
from src.callbacks import alarms, configuration, device, export, navigation, trends

navigation.register(app)
device.register(app)
trends.register(app)
alarms.register(app)
configuration.register(app)
export.register(app)

# ── 5. Run ────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    app.run(
        debug=settings.DEBUG,
        host=settings.HOST,
        port=settings.PORT,
    )
