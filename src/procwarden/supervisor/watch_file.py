import yaml
import logging
from pathlib import Path
from typing import Any, Dict, List, Union
from procwarden.exceptions import ConfigurationError
from procwarden.supervisor.watch import Watch

log = logging.getLogger(__name__)

WATCH_KEYS = {"name", "pid_file", "pid", "conditions"}


def load_watch_file(path: Union[str, Path]) -> List[Watch]:
    """
    Loads watches and their conditions from a YAML file of the form::

        watches:
          - name: web
            pid_file: /var/run/web.pid
            conditions:
              - kind: cpu_usage
                above: 50
                times: [3, 5]

    Conditions are generated but not validated; WatchSupervisor.register does that.

    :param path: Path of the YAML file.
    :return: The watches in file order.
    :raises ConfigurationError: If the file is missing, not YAML, or structurally wrong.
    """
    watch_path = Path(path)
    try:
        data = yaml.safe_load(watch_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"Watch file '{watch_path}' does not exist") from None
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Watch file '{watch_path}' is not valid YAML: {e}") from None

    if not isinstance(data, dict) or not isinstance(data.get("watches"), list):
        raise ConfigurationError(f"Watch file '{watch_path}' must contain a 'watches' list")

    watches = [_build_watch(entry, index) for index, entry in enumerate(data["watches"])]
    log.info(f"Loaded {len(watches)} watch(es) from {watch_path}")
    return watches


def _build_watch(entry: Any, index: int) -> Watch:
    if not isinstance(entry, dict) or not entry.get("name"):
        raise ConfigurationError(f"Watch #{index + 1} must be a mapping with a 'name'")

    unknown = set(entry) - WATCH_KEYS
    if unknown:
        raise ConfigurationError(f"Watch '{entry['name']}' has unknown keys: {', '.join(sorted(unknown))}")

    name = str(entry["name"])
    watch = Watch(name, pid_file=entry.get("pid_file"), pid=_pid_value(name, entry.get("pid")))
    for condition_entry in entry.get("conditions") or []:
        watch.add_condition(**_condition_attrs(watch, condition_entry))
    return watch


def _condition_attrs(watch: Watch, entry: Any) -> Dict[str, Any]:
    if not isinstance(entry, dict) or "kind" not in entry:
        raise ConfigurationError(f"Every condition of watch '{watch.name}' needs a 'kind'")
    attrs = dict(entry)
    if isinstance(attrs.get("times"), list):
        attrs["times"] = tuple(attrs["times"])
    return attrs


def _pid_value(name: str, value: Any) -> Any:
    # YAML leaves quoted pids as strings; Watch checks the range.
    if not isinstance(value, str):
        return value
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"Watch '{name}' has an invalid pid: {value!r}") from None
