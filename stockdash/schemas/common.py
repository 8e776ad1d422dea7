from typing import Annotated, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def coerce_identifier(value):
    # json-server style backends store explicit ids as strings ("12")
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        value_text = value.strip()
        if value_text.isdigit():
            return int(value_text)
        return value_text
    return value


ResourceId = Annotated[Union[int, str], BeforeValidator(coerce_identifier)]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


__all__ = ["ResourceId", "WireModel", "coerce_identifier"]
