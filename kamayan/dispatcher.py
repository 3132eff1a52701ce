"""Choose a functor's option values at run time from a configuration."""

from __future__ import annotations

from enum import Enum
from typing import Any

from kamayan.config import Config
from kamayan.options import OptionFactory, OptList, opt_label


class DispatchError(RuntimeError):
    """Raised when a configured option value is not handled by a functor."""


def _is_factory(option: Any) -> bool:
    if isinstance(option, type):
        return issubclass(option, OptionFactory)
    return isinstance(option, OptionFactory)


class Dispatcher:
    """Calls ``functor.dispatch`` with option values read from a configuration.

    The functor provides ``options``, a sequence of :class:`OptList` and
    :class:`OptionFactory` entries with factories first, and a ``dispatch``
    method. ``execute`` calls ``dispatch`` with one chosen value per entry,
    followed by its own arguments. A functor given as a class is instantiated
    for each call.

    The configuration is either a single :class:`Config` or the option values
    themselves.
    """

    def __init__(self, functor: Any, label: str, *args: Any) -> None:
        options = getattr(functor, "options", None)
        if options is None:
            raise TypeError(f"{functor!r} does not declare dispatch options")
        if not callable(getattr(functor, "dispatch", None)):
            raise TypeError(f"{functor!r} has no dispatch method")
        self.options = tuple(options)
        self._check_options()

        self.functor = functor
        self.label = label
        if len(args) == 1 and isinstance(args[0], Config):
            self.config = args[0]
        else:
            self.config = Config()
            for value in args:
                self.config.add(value)

    def _check_options(self) -> None:
        seen_list = False
        for option in self.options:
            if isinstance(option, OptList):
                seen_list = True
            elif _is_factory(option):
                if seen_list:
                    raise TypeError("composite options must come before option lists")
                for inner in option.options:
                    if not isinstance(inner, OptList):
                        raise TypeError(f"factory option {inner!r} is not an OptList")
            else:
                raise TypeError(f"unsupported dispatch option {option!r}")

    def _select(self, option: OptList) -> Enum:
        parm = self.config.get(option.enum_type)
        if parm in option.values:
            return parm
        allowed = "".join(f"{opt_label(value)} " for value in option.values)
        raise DispatchError(
            f"dispatch parm [{opt_label(parm)}] not handled\n"
            f"Allowed options are: ({allowed})\n"
            f"from: {self.label}\n"
        )

    def _resolve(self) -> list[Any]:
        chosen: list[Any] = []
        for option in self.options:
            if isinstance(option, OptList):
                chosen.append(self._select(option))
            else:
                values = [self._select(inner) for inner in option.options]
                chosen.append(option.composite(*values))
        return chosen

    def execute(self, *args: Any, **kwargs: Any) -> Any:
        """Run the functor with the configured options and return its result."""
        chosen = self._resolve()
        target = self.functor() if isinstance(self.functor, type) else self.functor
        return target.dispatch(*chosen, *args, **kwargs)