from .block_model import (  # noqa: F401
    BlockDefinition,
    BlockRecord,
    InputSlot,
    empty_input_values,
)
