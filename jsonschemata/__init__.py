import importlib

from jsonschemata._version import __version__

mod = "jsonschemata"
class LazyLoader:
    """
    Lazy loader for the jsonschemata API to keep import time low.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        try:
            return self._load_module(f"{mod}.{item}")
        except ModuleNotFoundError as e:
            raise AttributeError(f"module '{mod}' has no attribute '{item}'") from e

# Define the public names and their corresponding module paths
_mappings = {
    "compile": (f"{mod}.parser", "compile"),
    "compile_file": (f"{mod}.parser", "compile_file"),
    "Parser": (f"{mod}.parser", "Parser"),
    "JSONSchema": (f"{mod}.schema", "JSONSchema"),
    "SchemaError": (f"{mod}.schema", "SchemaError"),
    "BasicErrorEntry": (f"{mod}.output", "BasicErrorEntry"),
    "BasicOutput": (f"{mod}.output", "BasicOutput"),
    "DetailedOutput": (f"{mod}.output", "DetailedOutput"),
    "render_output": (f"{mod}.output", "render_output"),
    "DefaultSchemaLoader": (f"{mod}.loader", "DefaultSchemaLoader"),
    "FORMAT_CHECKERS": (f"{mod}.formats", "FORMAT_CHECKERS"),
    "validate_file": (f"{mod}.validate", "validate_file"),
    "validate_instance": (f"{mod}.validate", "validate_instance"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
