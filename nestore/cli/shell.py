"""
Nestore 交互式 Shell

三层嵌套的命令循环：进程 -> 数据库 -> 存储。
每层读取一行命令，按空白切分后分发；``exit`` 或输入结束时返回上一层。
核心层抛出的 NestoreException 在这里被捕获并显示，不会中断循环。
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..common.exceptions import InvalidInputError, NestoreException
from ..common.options import JsonBackendOptions, SqlExportOptions
from ..core.storage import Database, Store
from ..core.types import Record, infer_value
from ..query.builder import OPERATOR_DESCRIPTIONS, QueryOperator
from .help import DATABASE_COMMANDS, ROOT_COMMANDS, STORE_COMMANDS
from .parsing import (
    format_record,
    parse_direction,
    parse_name_list,
    parse_record_id,
    parse_record_map,
)

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], str]
Handler = Callable[[List[str]], None]


class BaseShell(ABC):
    """命令循环基类"""

    help_title = 'Available commands:'
    help_rows: List[Tuple[str, str]] = []
    farewell: Optional[str] = None

    def __init__(self, console: Console, read_line: Optional[ReadLine] = None):
        """
        Args:
            console: 输出使用的 rich Console
            read_line: 读取一行输入的函数，默认使用 console.input；输入结束时应抛出 EOFError
        """
        self.console = console
        self.read_line: ReadLine = read_line or console.input

    @property
    @abstractmethod
    def prompt(self) -> str:
        """当前层的提示符"""

    @abstractmethod
    def commands(self) -> Dict[str, Handler]:
        """命令名到处理函数的映射"""

    def run(self) -> None:
        """运行命令循环，直到 exit 或输入结束"""
        handlers = self.commands()
        while True:
            try:
                line = self.read_line(self.prompt)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break

            parts = line.split()
            if not parts:
                continue

            command = parts[0].lower()
            if command == 'exit':
                break
            if command == 'help':
                self.print_help()
                continue

            handler = handlers.get(command)
            if handler is None:
                self.console.print(
                    f"[yellow]Unknown command: {escape(command)}.[/yellow] Type 'help' for a list of commands."
                )
                continue

            try:
                handler(parts)
            except NestoreException as e:
                logger.debug("Command '%s' failed: %s", command, e.to_dict())
                self.error(e.message)

        if self.farewell:
            self.console.print(self.farewell)

    def print_help(self) -> None:
        table = Table(box=None, show_header=False, padding=(0, 2))
        table.add_column('command', style='bold')
        table.add_column('description')
        for usage, description in self.help_rows:
            table.add_row(escape(usage), escape(description))
        self.console.print(self.help_title)
        self.console.print(table)

    def echo(self, text: str) -> None:
        """原样输出用户数据（不解析 rich 标记）"""
        self.console.print(text, markup=False, highlight=False)

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def usage(self, text: str) -> None:
        self.console.print(f"Usage: {escape(text)}")

    def print_records(self, rows: List[Tuple[int, Record]], header: str, empty: str) -> None:
        if not rows:
            self.echo(empty)
            return
        self.echo(header)
        for record_id, record in rows:
            self.echo(f"ID: {record_id} - {format_record(record)}")


class StoreShell(BaseShell):
    """存储层命令循环"""

    help_title = 'Available store commands:'
    help_rows = STORE_COMMANDS
    farewell = "Let's step down and go back to the database!"

    def __init__(self, store: Store, console: Console, read_line: Optional[ReadLine] = None):
        super().__init__(console, read_line)
        self.store = store

    @property
    def prompt(self) -> str:
        return f"{escape(self.store.name)}> "

    def commands(self) -> Dict[str, Handler]:
        return {
            'new_record': self.do_new_record,
            'update_record': self.do_update_record,
            'delete_record': self.do_delete_record,
            'list_records': self.do_list_records,
            'get_record': self.do_get_record,
            'attributes': self.do_attributes,
            'filter': self.do_filter,
            'filters': self.do_filters,
            'operators': self.do_operators,
            'query': self.do_query,
            'sort': self.do_sort,
        }

    def do_new_record(self, parts: List[str]) -> None:
        if len(parts) < 2:
            self.usage('new_record <attribute:value,...>')
            self.echo('Example: new_record name:John Doe, age:30')
            return
        record = parse_record_map(' '.join(parts[1:]))
        record_id = self.store.add_record(record)
        self.echo(f"Record added with ID: {record_id}")

    def do_update_record(self, parts: List[str]) -> None:
        if len(parts) < 3:
            self.usage('update_record <record_id> <attribute:value,...>')
            return
        record_id = parse_record_id(parts[1])
        record = parse_record_map(' '.join(parts[2:]))
        self.store.update_record(record_id, record)
        self.echo(f"Record {record_id} updated successfully.")

    def do_delete_record(self, parts: List[str]) -> None:
        if len(parts) < 2:
            self.usage('delete_record <record_id>')
            return
        record_id = parse_record_id(parts[1])
        self.store.delete_record(record_id)
        self.echo(f"Record {record_id} deleted successfully.")

    def do_list_records(self, parts: List[str]) -> None:
        self.print_records(
            list(self.store.scan()),
            header=f"Records in store '{self.store.name}':",
            empty=f"No records found in store '{self.store.name}'.",
        )

    def do_get_record(self, parts: List[str]) -> None:
        if len(parts) < 2:
            self.usage('get_record <record_id>')
            return
        record_id = parse_record_id(parts[1])
        record = self.store.get_record(record_id)
        self.echo(f"Record {record_id}: {format_record(record)}")

    def do_attributes(self, parts: List[str]) -> None:
        if not self.store.attributes:
            self.echo(f"Store '{self.store.name}' has no attributes.")
            return
        self.echo(', '.join(sorted(self.store.attributes)))

    def do_filter(self, parts: List[str]) -> None:
        if len(parts) < 3:
            self.usage('filter <attribute> <value>')
            self.echo('Example: filter name John')
            return
        attribute = parts[1]
        value = ' '.join(parts[2:])
        result = self.store.filter(attribute, value)
        self.print_records(
            sorted(result.items()),
            header='Filtered records:',
            empty=f"No records found matching {attribute}: '{value}'.",
        )

    def do_filters(self, parts: List[str]) -> None:
        if len(parts) < 3:
            self.usage('filters <attributes> <values>')
            self.echo('Example: filters name,city John,Paris')
            return
        attributes = parse_name_list(parts[1])
        values = parse_name_list(' '.join(parts[2:]))
        if len(attributes) != len(values):
            raise InvalidInputError(
                f"Number of attributes ({len(attributes)}) and values ({len(values)}) must match."
            )
        result = self.store.filter_attributes(attributes, values)
        self.print_records(
            sorted(result.items()),
            header='Filtered records:',
            empty='No records found matching the specified attributes and values.',
        )

    def do_operators(self, parts: List[str]) -> None:
        table = Table(box=None, show_header=False, padding=(0, 2))
        table.add_column('operator', style='bold')
        table.add_column('description')
        for operator, description in OPERATOR_DESCRIPTIONS.items():
            table.add_row(operator.value, description)
        self.console.print('Available query operators:')
        self.console.print(table)

    def do_query(self, parts: List[str]) -> None:
        if len(parts) < 4:
            self.usage('query <attribute> <operator> <value>')
            self.echo('Example: query age gt 25')
            return
        attribute = parts[1]
        operator = QueryOperator.parse(parts[2])
        value_text = ' '.join(parts[3:])
        result = self.store.query(attribute, operator, infer_value(value_text))
        self.print_records(
            sorted(result.items()),
            header='Query results:',
            empty=f"No records found for query {attribute} {operator.value} '{value_text}'.",
        )

    def do_sort(self, parts: List[str]) -> None:
        if len(parts) < 3:
            self.usage('sort <attribute> <asc/desc>')
            self.echo('Example: sort age asc')
            return
        attribute = parts[1]
        ascending = parse_direction(parts[2])
        direction = 'asc' if ascending else 'desc'
        self.print_records(
            self.store.sort_by(attribute, ascending),
            header=f"Sorted records ({attribute} {direction}):",
            empty=f"No records to sort in store '{self.store.name}'.",
        )


class DatabaseShell(BaseShell):
    """数据库层命令循环"""

    help_title = 'Available database commands:'
    help_rows = DATABASE_COMMANDS
    farewell = "Let's go down a level!"

    def __init__(self, database: Database, console: Console, read_line: Optional[ReadLine] = None):
        super().__init__(console, read_line)
        self.database = database

    @property
    def prompt(self) -> str:
        return f"{escape(self.database.name)}> "

    def commands(self) -> Dict[str, Handler]:
        return {
            'new_store': self.do_new_store,
            'delete_store': self.do_delete_store,
            'list_stores': self.do_list_stores,
            'save': self.do_save,
            'export_sql': self.do_export_sql,
            'store': self.do_store,
        }

    def do_new_store(self, parts: List[str]) -> None:
        if len(parts) < 2:
            self.usage('new_store <name> [attributes]')
            return
        name = parts[1]
        if self.database.has_store(name):
            self.echo(f"Store '{name}' already exists.")
            return
        attributes = parse_name_list(parts[2]) if len(parts) > 2 else []
        self.database.add_store(name, attributes)
        self.echo(f"Store '{name}' created.")

    def do_delete_store(self, parts: List[str]) -> None:
        if len(parts) < 2:
            self.usage('delete_store <name>')
            return
        self.database.delete_store(parts[1])
        self.echo(f"Store '{parts[1]}' deleted.")

    def do_list_stores(self, parts: List[str]) -> None:
        names = self.database.store_names()
        if not names:
            self.echo('No stores found.')
            return
        self.echo('Stores:')
        for name in names:
            self.echo(f"- {name}")

    def do_save(self, parts: List[str]) -> None:
        path = self.database.save()
        self.echo(f"Database saved to {path}")

    def do_export_sql(self, parts: List[str]) -> None:
        include_drop = '--no-drop' not in parts[1:]
        path = self.database.export_sql(SqlExportOptions(include_drop=include_drop))
        self.echo(f"Database exported to {path}")

    def do_store(self, parts: List[str]) -> None:
        if len(parts) < 2:
            self.usage('store <name>')
            return
        name = parts[1]
        if not self.database.has_store(name):
            self.database.add_store(name)
            self.echo(f"Store '{name}' created.")
        StoreShell(self.database.get_store(name), self.console, self.read_line).run()


class RootShell(BaseShell):
    """最外层命令循环"""

    help_rows = ROOT_COMMANDS

    def __init__(
        self,
        console: Console,
        read_line: Optional[ReadLine] = None,
        data_dir: Optional[Path] = None,
        backend_options: Optional[JsonBackendOptions] = None,
    ):
        super().__init__(console, read_line)
        self.data_dir = data_dir
        self.backend_options = backend_options

    @property
    def prompt(self) -> str:
        return '> '

    def commands(self) -> Dict[str, Handler]:
        return {'database': self.do_database}

    def do_database(self, parts: List[str]) -> None:
        if len(parts) < 2:
            self.usage('database <name>')
            return
        database, loaded = Database.open(parts[1], self.data_dir, self.backend_options)
        if loaded:
            self.echo('Database loaded successfully from JSON file!')
        else:
            self.echo('Database file not found! Creating a new one.')
        DatabaseShell(database, self.console, self.read_line).run()
