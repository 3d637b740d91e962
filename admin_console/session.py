# admin_console/session.py
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class AdminSession:
    """
    The persisted "authenticated" marker.

    Survives restarts of the console; nothing in the console clears it.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._authenticated = False

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    def load(self) -> bool:
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            data = {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            data = {}
        self._authenticated = isinstance(data, dict) and data.get("authenticated") is True
        return self._authenticated

    def mark_authenticated(self) -> None:
        self._authenticated = True
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"authenticated": True}))
        except OSError as e:
            # the marker still holds for this run
            logger.warning("Could not persist session to %s: %s", self.path, e)
