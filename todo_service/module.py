import importlib
import logging
from pathlib import Path

from todo_service.types.module import Module

todo_error_logger = logging.getLogger("todo_service.error")

module_list: list[Module] = []

package_root = Path(__file__).parent

for endpoints_file in sorted(package_root.glob("modules/*/endpoints_*.py")):
    endpoint_module = importlib.import_module(
        ".".join(
            (
                package_root.name,
                *endpoints_file.relative_to(package_root).with_suffix("").parts,
            ),
        ),
    )
    if hasattr(endpoint_module, "module"):
        module: Module = endpoint_module.module
        module_list.append(module)
    else:
        todo_error_logger.error(
            f"Module {endpoints_file} does not declare a module. It won't be enabled.",
        )
