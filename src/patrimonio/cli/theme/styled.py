"""
Funções que criam objetos Text estilizados (não imprimem).
"""

from rich import box
from rich.panel import Panel
from rich.text import Text

from patrimonio.cli.theme.palette import get_palette


def styled_header(text: str, subtitle: str = None) -> Panel:
    """Cria um cabeçalho estilizado."""
    p = get_palette()
    content = Text(text, style=f"bold {p.primary}")
    if subtitle:
        content.append(f"\n{subtitle}", style=p.muted)

    return Panel(
        content,
        border_style=p.border,
        box=box.ROUNDED,
        padding=(0, 2),
    )


def styled_label(label: str, value, unit: str = None) -> Text:
    """Rótulo com valor."""
    p = get_palette()
    text = Text()
    text.append(f"{label}: ", style=p.label)
    text.append("-" if value in (None, "") else str(value), style=f"bold {p.number}")
    if unit:
        text.append(f" {unit}", style=p.muted)
    return text


def styled_success(text: str) -> Text:
    p = get_palette()
    return Text(f"[+] {text}", style=p.success)


def styled_warning(text: str) -> Text:
    p = get_palette()
    return Text(f"[!] {text}", style=p.warning)


def styled_error(text: str) -> Text:
    p = get_palette()
    return Text(f"[x] {text}", style=p.error)


def styled_info(text: str) -> Text:
    p = get_palette()
    return Text(f"[i] {text}", style=p.info)


def styled_muted(text: str) -> Text:
    p = get_palette()
    return Text(text, style=p.muted)


def styled_status(status: str) -> Text:
    """Status do bem com cor semântica."""
    p = get_palette()
    colors = {
        "ativo": p.success,
        "em falta": p.warning,
        "manutenção": p.info,
        "quebrado": p.error,
    }
    return Text(status or "-", style=colors.get((status or "").lower(), p.muted))
