"""Command line script for FastDoc."""
import dataclasses
import json
import os
import sys
from argparse import ArgumentParser, Namespace, RawTextHelpFormatter
from pathlib import Path
from textwrap import dedent
from typing import Any, Optional, Sequence

from fastdoc.config import DocumentConventions
from fastdoc.core import FastDocError
from fastdoc.core.models import METADATA
from fastdoc.diff import ChangeType, DocumentsChanges, deep_equals
from fastdoc.utils import Fore, bold, fg

YELLOW, CYAN, RED, GREEN, WHITE = (
    Fore.YELLOW,
    Fore.CYAN,
    Fore.RED,
    Fore.GREEN,
    Fore.WHITE,
)
WHITE_EX, CYAN_EX = Fore.LIGHTWHITE_EX, Fore.LIGHTCYAN_EX

CHANGE_STYLES = {
    ChangeType.NEW_FIELD: ("+", GREEN),
    ChangeType.ARRAY_VALUE_ADDED: ("+", GREEN),
    ChangeType.REMOVED_FIELD: ("-", RED),
    ChangeType.ARRAY_VALUE_REMOVED: ("-", RED),
    ChangeType.FIELD_CHANGED: ("~", YELLOW),
    ChangeType.DOCUMENT_ADDED: ("+", GREEN),
    ChangeType.DOCUMENT_DELETED: ("-", RED),
}


def load_json_document(path: str) -> dict[str, Any]:
    try:
        with open(path, encoding="utf8") as f:
            doc = json.load(f)
    except FileNotFoundError:
        raise FastDocError(f"file not found: {path}")
    except json.JSONDecodeError as e:
        raise FastDocError(f"invalid JSON document: {path} ({e})")

    if not isinstance(doc, dict):
        raise FastDocError(f"JSON document should be an object: {path}")
    return doc


def format_change(change: DocumentsChanges) -> str:
    mark, color = CHANGE_STYLES[change.change]
    name = fg(change.field_name or "", WHITE_EX)
    kind = fg(change.change.value, color)

    if change.change == ChangeType.FIELD_CHANGED:
        detail = (
            f"{change.field_old_value} ({change.field_old_type}) -> "
            f"{change.field_new_value} ({change.field_new_type})"
        )
    elif change.field_new_type is not None:
        detail = f"{change.field_new_value} ({change.field_new_type})"
    elif change.field_old_type is not None:
        detail = f"{change.field_old_value} ({change.field_old_type})"
    else:
        detail = ""

    return f"{bold(mark, color)} {kind} {name} {detail}".rstrip()


class FastDocCommand:
    def __init__(self, path: Optional[Path] = None):
        self.path = path or Path(os.path.abspath("."))
        self.conventions = DocumentConventions.load_from_config(self.path)

    def info(self):
        """setup.cfg 의 [fastdoc] 섹션을 반영한 세션 설정을 출력합니다."""
        dot = bold("-", YELLOW)
        print(bold("FastDoc Conventions", CYAN))
        for field in dataclasses.fields(self.conventions):
            value = getattr(self.conventions, field.name)
            print(dot, fg(field.name, CYAN), ":", fg(value, WHITE_EX))

    def diff(self, old: str, new: str, metadata: bool = False) -> list[DocumentsChanges]:
        """두 JSON 문서 파일의 필드 단위 변경 내역을 출력합니다.

        --metadata 옵션을 주면 ``@metadata`` 필드도 비교합니다.
        """
        old_doc = load_json_document(old)
        new_doc = load_json_document(new)

        old_meta = old_doc.pop(METADATA, {})
        new_meta = new_doc.pop(METADATA, {})

        changes = list[DocumentsChanges]()
        deep_equals(new_doc, old_doc, changes)
        if metadata:
            deep_equals(new_meta, old_meta, changes, METADATA)

        if not changes:
            print(fg("no changes", GREEN))
        for change in changes:
            print(format_change(change))

        return changes


class FastDocCommandParser:
    """콘솔 커맨드 명령어 파서.

    실제 작업은 `FastDocCommand` 객체에 위임합니다.
    """

    def __init__(self):
        self.parser = ArgumentParser(
            "fastdoc",
            description=f"✨ {bold('FastDoc')} : {fg('command line utility', CYAN_EX)}",
        )
        self._subparsers = self.parser.add_subparsers(dest="command")
        self._cmd = FastDocCommand()

        for handler in [self._cmd.info, self._cmd.diff]:
            command = handler.__name__
            # 핸들러 함수의 주석을 커맨드라인 도움말로 변환합니다.
            doc = None
            if handler.__doc__:
                lines = handler.__doc__.splitlines()
                doc = lines[0] + "\n" + dedent("\n".join(lines[1:]))
            parser = self._subparsers.add_parser(
                command,
                description=doc,
                formatter_class=RawTextHelpFormatter,
            )
            if command == "diff":
                parser.add_argument("old", metavar="OLD.json")
                parser.add_argument("new", metavar="NEW.json")
                parser.add_argument(
                    "--metadata", action="store_true", help="@metadata 필드도 비교"
                )

    def parse_args(self, args: Sequence[str]) -> int:
        """콘솔 명령어를 해석해서 적절한 작업을 수행합니다.

        ``diff`` 는 변경 내역이 있으면 1, 오류가 나면 2 를 리턴합니다.
        """
        if not args:
            self.parser.print_help()
            return 0

        ns = self.parser.parse_args(args)
        try:
            if hasattr(self, ns.command):
                return getattr(self, ns.command)(ns)
            getattr(self._cmd, ns.command)()
            return 0
        except FastDocError as e:
            print(
                f"{bold('FastDoc ERROR:', RED)} {fg(e.message, YELLOW)}",
                file=sys.stderr,
            )
            return 2

    def diff(self, ns: Namespace) -> int:
        """`diff` 명령어 처리."""
        changes = self._cmd.diff(ns.old, ns.new, metadata=ns.metadata)
        return 1 if changes else 0


def console_main():
    parser = FastDocCommandParser()
    sys.exit(parser.parse_args(sys.argv[1:]))


if __name__ == "__main__":
    console_main()
