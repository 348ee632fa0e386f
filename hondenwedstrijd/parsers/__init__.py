# Import all strategies to trigger registration with the registry.
from hondenwedstrijd.parsers import table  # noqa: F401
from hondenwedstrijd.parsers import listing  # noqa: F401
from hondenwedstrijd.parsers import free_text  # noqa: F401
