"""
Shell 帮助文本
"""

from typing import List, Tuple

ROOT_COMMANDS: List[Tuple[str, str]] = [
    ('exit', 'Exit the program'),
    ('help', 'Display this help menu'),
    ('database <name>', 'Switch to a database, loading it from <name>.json if it exists'),
]

DATABASE_COMMANDS: List[Tuple[str, str]] = [
    ('help', 'Show this help message'),
    ('exit', 'Exit this level'),
    ('new_store <name> [attributes]', 'Create a new store (attributes comma-separated)'),
    ('delete_store <name>', 'Delete a store'),
    ('list_stores', 'List all stores'),
    ('save', 'Save the database to a JSON file'),
    ('export_sql [--no-drop]', 'Export the database to a SQL script'),
    ('store <name>', 'Change to a store, creating it if it does not exist'),
]

STORE_COMMANDS: List[Tuple[str, str]] = [
    ('help', 'Show this help message'),
    ('exit', 'Exit this level'),
    ('new_record <record_map>', 'Create a new record (Ex: name:John Doe, age:30)'),
    ('update_record <id> <record_map>', 'Replace the record with the given id'),
    ('delete_record <id>', 'Delete a record using its id'),
    ('list_records', 'List all records'),
    ('get_record <id>', 'Get a particular record using its id'),
    ('attributes', 'List the attributes of the store'),
    ('filter <attribute> <value>', 'Filter records whose text attribute equals the value'),
    ('filters <attributes> <values>', 'Filter by several attributes (Ex: filters name,city Alice,Paris)'),
    ('operators', 'Display the operators of any query'),
    ('query <attribute> <operator> <value>', 'Query records using a particular operator'),
    ('sort <attribute> <asc|desc>', 'Sort records in ascending or descending order'),
]
