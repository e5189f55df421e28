"""
Function catalog builder.

Enumerates the user functions of a module, keeps those named in the
allow-list, and reflects each into a FunctionRecord:
- return annotation text
- parameters (name, annotation text, literal default)
- exact definition source
"""

import importlib
import importlib.util
import inspect
import json
import logging
import math
import sys
from pathlib import Path
from types import FunctionType, ModuleType
from typing import Any, List, Optional, Union

from funccatalog.catalog.source import extract_span, locate_definition
from funccatalog.config import CatalogSettings
from funccatalog.schemas import FunctionRecord, ParamRecord

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (bool, int, float, str, type(None))

_VARIADIC_MARKERS = {
    inspect.Parameter.VAR_POSITIONAL: "*",
    inspect.Parameter.VAR_KEYWORD: "**",
}


def load_module_from_file(path: Union[str, Path]) -> ModuleType:
    """
    Import a ``.py`` file under a private module name.

    Raises:
        OSError: If the file does not exist or cannot be read
    """
    path = Path(path).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"Module file not found: {path}")

    module_name = f"_funccatalog_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def user_functions(module: ModuleType) -> List[FunctionType]:
    """
    Plain functions defined in ``module`` itself, in definition order.

    Only the binding under the declared name counts, so aliases such as
    ``plus = add`` do not repeat a function.
    """
    return [
        obj for name, obj in vars(module).items()
        if inspect.isfunction(obj)
        and obj.__module__ == module.__name__
        and name == obj.__name__
    ]


def format_annotation(annotation: Any) -> str:
    """Render an annotation as text; empty string when there is none."""
    if annotation is inspect.Parameter.empty:
        return ""
    # Postponed annotations are already text
    if isinstance(annotation, str):
        return annotation
    return inspect.formatannotation(annotation)


def _is_literal(value: Any) -> bool:
    # inf and nan have no JSON literal
    if isinstance(value, float) and not math.isfinite(value):
        return False
    if isinstance(value, _SCALAR_TYPES):
        return True
    if isinstance(value, (list, tuple)):
        return all(_is_literal(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and _is_literal(v) for k, v in value.items())
    return False


def _to_json_literal(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_to_json_literal(item) for item in value]
    if isinstance(value, dict):
        return {k: _to_json_literal(v) for k, v in value.items()}
    return value


def literal_default(value: Any) -> Any:
    """Literal defaults are kept as values, anything else as its repr."""
    if _is_literal(value):
        return _to_json_literal(value)
    return repr(value)


class CatalogBuilder:
    """
    Build the function catalog of a module.

    Usage:
        builder = CatalogBuilder(CatalogSettings(allow_list=["add"]))
        records = builder.build()
        print(builder.to_json(records))
    """

    def __init__(self, settings: Optional[CatalogSettings] = None):
        """
        Initialize the builder.

        Args:
            settings: Catalog settings (default: CatalogSettings())
        """
        self.settings = settings or CatalogSettings()

    def load_module(self) -> ModuleType:
        """Import the module named in the settings."""
        logger.debug(f"Importing {self.settings.module}")
        return importlib.import_module(self.settings.module)

    def build(self, module: Optional[ModuleType] = None) -> List[FunctionRecord]:
        """
        Reflect every allow-listed function defined in ``module``.

        Args:
            module: Module to catalog (default: the module named in the settings)

        Returns:
            FunctionRecords in definition order

        Raises:
            OSError: If a defining file cannot be read
            SourceUnavailableError: If a function's definition cannot be located
        """
        if module is None:
            module = self.load_module()

        allowed = set(self.settings.allow_list)
        records = []
        for func in user_functions(module):
            if func.__name__ not in allowed:
                logger.debug(f"Skipping {func.__name__}: not in allow-list")
                continue
            records.append(self.reflect(func))

        missing = allowed - {r.name for r in records}
        if missing:
            logger.info(f"Allow-listed but not defined in {module.__name__}: {sorted(missing)}")

        logger.info(f"Cataloged {len(records)} function(s) from {module.__name__}")
        return records

    def reflect(self, func: FunctionType) -> FunctionRecord:
        """Reflect one function into a FunctionRecord."""
        signature = inspect.signature(func)
        span = locate_definition(func)

        return FunctionRecord(
            name=func.__name__,
            return_type=format_annotation(signature.return_annotation),
            params=[self._param_record(p) for p in signature.parameters.values()],
            source=extract_span(
                span.lines,
                span.line_start,
                span.line_end,
                declaration_offset=self.settings.declaration_offset,
            ),
        )

    def _param_record(self, param: inspect.Parameter) -> ParamRecord:
        marker = _VARIADIC_MARKERS.get(param.kind, "")
        has_default = param.default is not inspect.Parameter.empty
        return ParamRecord(
            name=f"{marker}{self.settings.param_prefix}{param.name}",
            type=format_annotation(param.annotation),
            default=literal_default(param.default) if has_default else None,
        )

    def to_json(self, records: List[FunctionRecord]) -> str:
        """Serialize records as indented JSON with the ``type`` key for return types."""
        payload = [r.model_dump(by_alias=True) for r in records]
        return json.dumps(payload, indent=self.settings.indent)
