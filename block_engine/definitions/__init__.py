from .block_definition_loader import (  # noqa: F401
    BlockDefinitionError,
    load_block_definition_file,
    load_block_definitions_from_dir,
    parse_block_document,
    parse_block_section,
)
