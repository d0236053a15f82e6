# chat_translator/cli.py
"""
Chat-Translator 命令行工具：在终端里直接驱动翻译引擎。
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chat_translator.config import ChatTranslatorConfig
from chat_translator.coordinator import Coordinator
from chat_translator.logging_config import setup_logging
from chat_translator.types import (
    ProviderKind,
    RequestConfig,
    TranslationResult,
    TranslationStatus,
)

log = structlog.get_logger("chat_translator.cli")
console = Console()

app = typer.Typer(help="Chat-Translator 命令行工具")


def _build_request_config(
    provider: ProviderKind,
    keys: list[str],
    no_fallback: bool,
    dictionary_file: Optional[Path],
) -> RequestConfig:
    dictionary = ""
    if dictionary_file is not None:
        dictionary = dictionary_file.read_text(encoding="utf-8")
    return RequestConfig(
        provider=provider,
        credentials=keys,
        fallback_enabled=not no_fallback,
        dictionary=dictionary,
    )


def _load_config(target_lang: Optional[str]) -> ChatTranslatorConfig:
    config = (
        ChatTranslatorConfig(target_lang=target_lang)
        if target_lang
        else ChatTranslatorConfig()
    )
    setup_logging(log_level=config.logging.level, log_format=config.logging.format)
    return config


def _render_results(texts: list[str], results: list[TranslationResult]) -> None:
    table = Table(title="翻译结果")
    table.add_column("原文", overflow="fold")
    table.add_column("译文 / 错误", overflow="fold")
    table.add_column("来源", style="dim")
    for text, result in zip(texts, results, strict=True):
        if result.status == TranslationStatus.TRANSLATED:
            source = "cache" if result.from_cache else (
                result.provider.value if result.provider else "-"
            )
            translation = escape(result.translation or "")
            table.add_row(escape(text), f"[green]{translation}[/green]", source)
        elif result.status == TranslationStatus.SKIPPED:
            table.add_row(escape(text), "[dim]（跳过）[/dim]", "-")
        else:
            kind = result.error_kind.value if result.error_kind else "-"
            error = escape(result.error or "")
            table.add_row(escape(text), f"[red]{error}[/red]", kind)
    console.print(table)


async def _translate_all(
    config: ChatTranslatorConfig, texts: list[str], request_config: RequestConfig
) -> list[TranslationResult]:
    async with Coordinator(config) as coordinator:
        return list(
            await asyncio.gather(
                *(coordinator.translate(text, request_config) for text in texts)
            )
        )


async def _translate_stream(
    config: ChatTranslatorConfig, request_config: RequestConfig
) -> None:
    """逐行读取标准输入，每一行到达时立即并发翻译。"""
    loop = asyncio.get_running_loop()
    async with Coordinator(config) as coordinator:
        tasks: set[asyncio.Task[None]] = set()

        async def _one(line: str) -> None:
            result = await coordinator.translate(line, request_config)
            if result.status == TranslationStatus.TRANSLATED:
                body = f"[green]→ {escape(result.translation or '')}[/green]"
            elif result.status == TranslationStatus.FAILED:
                body = f"[red]✗ {escape(result.error or '')}[/red]"
            else:
                return
            console.print(f"{escape(line)}\n  {body}")

        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            line = line.rstrip("\n")
            if not line.strip():
                continue
            task = asyncio.create_task(_one(line))
            tasks.add(task)
            task.add_done_callback(tasks.discard)
        if tasks:
            await asyncio.gather(*tasks)
        log.info("输入结束", **coordinator.stats())


@app.command()
def translate(
    texts: list[str] = typer.Argument(..., help="要翻译的聊天文本，可传入多条"),
    provider: ProviderKind = typer.Option(
        ProviderKind.GOOGLE, "--provider", "-p", help="翻译服务商"
    ),
    keys: list[str] = typer.Option(
        [], "--key", "-k", help="服务商 API 密钥，可重复传入以轮换使用"
    ),
    no_fallback: bool = typer.Option(
        False, "--no-fallback", help="主服务商失败时不回退到免费服务商"
    ),
    dictionary_file: Optional[Path] = typer.Option(
        None,
        "--dictionary-file",
        "-d",
        exists=True,
        dir_okay=False,
        help="用户词典文件，每行 `原文,译文`",
    ),
    target_lang: Optional[str] = typer.Option(
        None, "--target", "-t", help="目标语言（默认读取配置 CT_TARGET_LANG）"
    ),
) -> None:
    """并发翻译一条或多条文本，并以表格输出结果。"""
    try:
        config = _load_config(target_lang)
    except ValueError as e:
        console.print(f"[red]❌ 配置无效: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    request_config = _build_request_config(provider, keys, no_fallback, dictionary_file)
    results = asyncio.run(_translate_all(config, texts, request_config))
    _render_results(texts, results)
    if any(r.status == TranslationStatus.FAILED for r in results):
        raise typer.Exit(1)


@app.command()
def stream(
    provider: ProviderKind = typer.Option(
        ProviderKind.GOOGLE, "--provider", "-p", help="翻译服务商"
    ),
    keys: list[str] = typer.Option(
        [], "--key", "-k", help="服务商 API 密钥，可重复传入以轮换使用"
    ),
    no_fallback: bool = typer.Option(
        False, "--no-fallback", help="主服务商失败时不回退到免费服务商"
    ),
    dictionary_file: Optional[Path] = typer.Option(
        None, "--dictionary-file", "-d", exists=True, dir_okay=False
    ),
    target_lang: Optional[str] = typer.Option(None, "--target", "-t"),
) -> None:
    """从标准输入逐行读取聊天消息并实时翻译。"""
    try:
        config = _load_config(target_lang)
    except ValueError as e:
        console.print(f"[red]❌ 配置无效: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    request_config = _build_request_config(provider, keys, no_fallback, dictionary_file)
    try:
        asyncio.run(_translate_stream(config, request_config))
    except KeyboardInterrupt:
        console.print("[yellow]已中断。[/yellow]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
