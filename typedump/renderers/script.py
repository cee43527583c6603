"""Disassembler integration script renderer."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..models import TypeModel

_PRELUDE = """\
import idaapi
import idc


def set_name(addr, name):
    ret = idc.set_name(addr, name, idc.SN_NOWARN | idc.SN_NOCHECK)
    if ret == 0:
        new_name = name + "_" + str(addr)
        idc.set_name(addr, new_name, idc.SN_NOWARN | idc.SN_NOCHECK)


idaapi.msg("Applying method names\\n")
"""


class IdaScriptRenderer:
    """Writes an IDA Python script naming every method with a known address."""

    def write_script(self, model: TypeModel, path: str) -> None:
        lines: List[str] = [f"# Image: {model.image_name}", "", _PRELUDE]
        for entry in sorted(model.types, key=lambda item: item.index):
            for method in entry.methods:
                if method.address is None:
                    continue
                symbol = f"{entry.full_name}$${method.name}"
                lines.append(f"set_name(0x{method.address:X}, {symbol!r})")
        lines.append("")
        lines.append('idaapi.msg("Done\\n")')

        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("\n".join(lines) + "\n", encoding="utf-8")


__all__ = ["IdaScriptRenderer"]
