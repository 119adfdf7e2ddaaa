#!/usr/bin/env python3
"""
hostsed - 命令行入口点

查看和编辑操作系统的 hosts 文件。
"""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

# 将当前目录添加到路径以导入 hostsed 模块
sys.path.insert(0, str(Path(__file__).parent))

from hostsed import Config, HostsEditor, HostsFileBusyError, HostsFileNotFoundError

cli = typer.Typer(help="查看和编辑 hosts 文件。")


def _editor() -> HostsEditor:
    # 从环境变量加载配置
    config = Config.from_env()
    try:
        return HostsEditor(config)
    except ValueError as e:
        typer.echo(f"配置无效: {e}", err=True)
        raise typer.Exit(code=1)


@contextmanager
def _handle_errors() -> Iterator[None]:
    try:
        yield
    except HostsFileNotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    except HostsFileBusyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    except (OSError, UnicodeError, ValueError, IndexError) as e:
        typer.echo(f"错误: {e}", err=True)
        raise typer.Exit(code=1)


@cli.command("list")
def list_entries() -> None:
    """列出 hosts 文件中的条目"""
    editor = _editor()
    with _handle_errors():
        editor.open()
        for index, entry in editor.entries():
            line = f"{index}\t{entry.address}\t{entry.hostname}"
            if entry.has_comment:
                line += f"\t#{entry.comment.strip()}"
            typer.echo(line)


@cli.command()
def show() -> None:
    """显示保存时将写入的完整文本"""
    editor = _editor()
    with _handle_errors():
        editor.open()
        typer.echo(editor.render(), nl=False)


@cli.command()
def add(
    ip: str,
    host: str,
    comment: str = typer.Option("", "--comment", "-c", help="条目注释"),
) -> None:
    """添加条目并保存"""
    editor = _editor()
    with _handle_errors():
        editor.open()
        entry = editor.add(ip, host, comment)
        editor.save()
        typer.echo(f"已添加: {entry}")


@cli.command()
def delete(index: int) -> None:
    """按序号删除条目并保存（序号见 list 命令）"""
    editor = _editor()
    with _handle_errors():
        editor.open()
        entry = editor.delete(index)
        editor.save()
        typer.echo(f"已删除: {entry}")


@cli.command()
def sort(
    field: str = typer.Argument("address", help="address、hostname 或 comment"),
    reverse: bool = typer.Option(False, "--reverse", "-r", help="降序"),
) -> None:
    """排序条目并保存"""
    editor = _editor()
    with _handle_errors():
        editor.open()
        editor.sort(field, reverse)
        written = editor.save()
        typer.echo(f"已排序并写入 {written} 条记录")


@cli.command("import")
def import_file(source: Path) -> None:
    """把其他文件中的条目追加到 hosts 文件"""
    editor = _editor()
    with _handle_errors():
        editor.open()
        report = editor.import_file(source)
        editor.save()
        typer.echo(f"已导入 {report.loaded} 条记录，跳过 {report.skipped} 行")


@cli.command()
def export(target: Path) -> None:
    """把 hosts 文件中的条目导出到其他文件"""
    editor = _editor()
    with _handle_errors():
        editor.open()
        written = editor.export_file(target)
        typer.echo(f"已导出 {written} 条记录到 {target}")


@cli.command()
def restore(
    yes: bool = typer.Option(False, "--yes", "-y", help="不询问直接恢复"),
) -> None:
    """恢复 hosts 文件的默认内容"""
    editor = _editor()
    if not yes:
        typer.confirm(f"确定要恢复 {editor.hosts_manager.file_path} 的默认内容吗?", abort=True)
    with _handle_errors():
        editor.restore_defaults()
        written = editor.save()
        typer.echo(f"已恢复默认内容，写入 {written} 条记录")


if __name__ == '__main__':
    cli()
