"""Base model for everything that crosses the HTTP boundary.

Python code uses snake_case attributes; JSON uses camelCase keys
(``statusCode``, ``categoryId``). Both spellings are accepted on input.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }
