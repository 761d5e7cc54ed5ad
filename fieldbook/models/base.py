from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class FieldbookModel(BaseModel):
    """
    Base model for documents exchanged with the web client and the persistence API.
    Fields are snake_case in Python and camelCase on the wire; either is accepted on input.
    Subclasses that reach the persistence boundary implement to_payload().
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
