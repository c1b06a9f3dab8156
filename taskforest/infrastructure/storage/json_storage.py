"""JSON file storage with Result-based error handling.

Provides a thin wrapper around file I/O operations for JSON data,
returning Result types instead of raising exceptions.
"""

import json
import logging
from pathlib import Path
from typing import Any

from taskforest.domain.shared import Err, Ok, RepositoryError, Result

logger = logging.getLogger(__name__)


class JsonStorage:
    """Low-level JSON file I/O with Result-based error handling.

    This class wraps basic JSON operations (load/save) and returns
    Result types for explicit error handling. It does not contain
    any domain logic - just file I/O.

    Example:
        storage = JsonStorage()
        result = storage.load_json(Path("tasks.json"))
        if isinstance(result, Ok):
            data = result.value
        else:
            print(f"Error: {result.error}")
    """

    def load_json(self, path: Path) -> Result[dict[str, Any], RepositoryError]:
        """Load a JSON object from a file.

        Args:
            path: Path to the JSON file to read.

        Returns:
            Ok(dict) if successful, Err(RepositoryError) if the file is
            missing, unreadable, or does not hold a JSON object.
        """
        try:
            if not path.exists():
                return Err(RepositoryError(f"File not found: {path}"))

            content = path.read_text(encoding="utf-8")
            data = json.loads(content)

        except json.JSONDecodeError as e:
            return Err(RepositoryError(f"Invalid JSON in {path}: {e}"))
        except PermissionError:
            return Err(RepositoryError(f"Permission denied reading {path}"))
        except OSError as e:
            return Err(RepositoryError(f"Error reading {path}: {e}"))

        if not isinstance(data, dict):
            return Err(RepositoryError(f"Expected a JSON object in {path}"))
        return Ok(data)

    def save_json(
        self,
        path: Path,
        data: dict[str, Any],
        indent: int = 2,
    ) -> Result[None, RepositoryError]:
        """Save JSON data to a file.

        The data is written to a sibling temporary file first and then
        moved into place, so a failed write never truncates the old file.

        Args:
            path: Path to the JSON file to write.
            data: Dictionary to serialize as JSON.
            indent: JSON indentation level (default 2).

        Returns:
            Ok(None) if successful, Err(RepositoryError) if failed.
        """
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            content = json.dumps(data, indent=indent)
            tmp_path.write_text(content, encoding="utf-8")
            tmp_path.replace(path)
            logger.debug("Wrote %d bytes to %s", len(content), path)
            return Ok(None)

        except TypeError as e:
            return Err(RepositoryError(f"Data not JSON serializable: {e}"))
        except PermissionError:
            return Err(RepositoryError(f"Permission denied writing {path}"))
        except OSError as e:
            return Err(RepositoryError(f"Error writing {path}: {e}"))
