from __future__ import annotations

from dataclasses import asdict, dataclass
import json
from pathlib import Path
import tempfile

from .code_emitter import Framework
from .history import DEFAULT_HISTORY_LIMIT

CONFIG_DIR = Path.home() / ".locatorforge"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(slots=True)
class WorkbenchSettings:
    default_framework: str = Framework.PLAYWRIGHT.value
    history_limit: int = DEFAULT_HISTORY_LIMIT
    request_timeout: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    include_hidden: bool = False


def load_settings(config_path: Path | None = None) -> WorkbenchSettings:
    path = config_path or CONFIG_PATH
    if not path.exists() or not path.is_file():
        return WorkbenchSettings()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, TypeError):
        return WorkbenchSettings()

    if not isinstance(payload, dict):
        return WorkbenchSettings()

    defaults = WorkbenchSettings()
    framework = Framework.parse(payload.get("default_framework"))
    return WorkbenchSettings(
        default_framework=framework.value if framework else defaults.default_framework,
        history_limit=_positive_int(payload.get("history_limit"), defaults.history_limit),
        request_timeout=_positive_float(payload.get("request_timeout"), defaults.request_timeout),
        user_agent=str(payload.get("user_agent") or defaults.user_agent),
        include_hidden=bool(payload.get("include_hidden", defaults.include_hidden)),
    )


def save_settings(settings: WorkbenchSettings, config_path: Path | None = None) -> tuple[bool, str | None]:
    path = config_path or CONFIG_PATH

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return False, f"Could not create config folder: {exc}"

    payload = json.dumps(asdict(settings), ensure_ascii=True, indent=2, sort_keys=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(payload)
            handle.flush()
            temp_path = Path(handle.name)

        temp_path.replace(path)
    except OSError as exc:
        if temp_path and temp_path.exists():
            temp_path.unlink(missing_ok=True)
        return False, f"Could not write settings: {exc}"

    return True, None


def _positive_int(value: object, default: int) -> int:
    try:
        number = int(str(value))
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _positive_float(value: object, default: float) -> float:
    try:
        number = float(str(value))
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
