import logging
from typing import Dict, Type
from procwarden.exceptions import ConfigurationError
from procwarden.conditions.base import PollCondition
from procwarden.conditions.cpu_usage import CpuUsage

log = logging.getLogger(__name__)

CONDITIONS: Dict[str, Type[PollCondition]] = {
    "cpu_usage": CpuUsage,
    "child_cpu_usage": CpuUsage,
}


def generate(kind: str, watch=None, **attrs) -> PollCondition:
    """
    Creates a condition by its registered name and binds it to a watch.

    :param kind: Registered condition name, e.g. 'cpu_usage'.
    :param watch: The owning watch.
    :param attrs: Attributes to set on the new condition (e.g. above, times).
    :return: The new, not yet validated, condition.
    :raises ConfigurationError: For an unknown kind or attribute.
    """
    try:
        condition_class = CONDITIONS[kind]
    except KeyError:
        raise ConfigurationError(f"Unknown condition kind '{kind}'. Known kinds: {', '.join(sorted(CONDITIONS))}") from None

    condition = condition_class()
    condition.watch = watch
    for key, value in attrs.items():
        if key not in condition_class.ATTRIBUTES:
            raise ConfigurationError(f"Condition '{kind}' has no attribute '{key}'")
        setattr(condition, key, value)
    log.debug(f"Generated condition {condition.friendly_name}")
    return condition
