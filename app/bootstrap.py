# Puts the project root on sys.path so `streamlit run app/streamlit_app.py`
# finds core/, services/ and persistence/ without an installed package.
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.config import get_app_config  # noqa: E402
from core.logging_config import setup_logging  # noqa: E402

_cfg = get_app_config()
setup_logging(level=_cfg.log_level, environment=_cfg.environment)
