"""Field tables for listing records.

Pure data: the identifier marker, the pinned columns of the dynamic schema,
the fixed column list with its synonym table, and header styling for the
fixed-schema export.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

IDENTIFIER_FIELD = "编号"

# Dynamic schema: these fields are moved to the front, in this order.
PINNED_FIELDS: Tuple[str, ...] = (IDENTIFIER_FIELD,)

# Shown in the table for missing or empty values. Never exported.
PLACEHOLDER = "-"

# Blank headers are spacer columns and may repeat.
SPACER = ""

FIXED_HEADERS: Tuple[str, ...] = (
    IDENTIFIER_FIELD,
    "哈夫币",
    "段位",
    "等级",
    "保险格",
    "体力",
    "负重",
    "特殊皮肤",
    "刀皮",
    "KD",
    "租金",
    "押金",
    "合计",
    "租期",
    "登录方式",
    "比例",
    SPACER,
    SPACER,
    "备注",
)

# Raw key -> canonical header. Lookups ignore case and whitespace.
KEY_SYNONYMS: Dict[str, str] = {
    "编号": IDENTIFIER_FIELD,
    "账号编号": IDENTIFIER_FIELD,
    "哈夫币": "哈夫币",
    "哈弗币": "哈夫币",
    "总资产": "哈夫币",
    "段位": "段位",
    "当前段位": "段位",
    "等级": "等级",
    "账号等级": "等级",
    "保险格": "保险格",
    "保险": "保险格",
    "安全箱": "保险格",
    "体力": "体力",
    "负重": "负重",
    "皮肤": "特殊皮肤",
    "特殊皮肤": "特殊皮肤",
    "刀皮": "刀皮",
    "近战武器": "刀皮",
    "KD": "KD",
    "K/D": "KD",
    "租金": "租金",
    "价格": "租金",
    "日租": "租金",
    "押金": "押金",
    "合计": "合计",
    "总价": "合计",
    "租期": "租期",
    "租赁时长": "租期",
    "登录方式": "登录方式",
    "上号方式": "登录方式",
    "比例": "比例",
    "备注": "备注",
    "说明": "备注",
}


@dataclass(frozen=True)
class ColumnStyle:
    font_color: str
    fill_color: str
    width: float = 12


HEADER_FONT_SIZE = 11
HEADER_ROW_HEIGHT = 32

_BASE = ColumnStyle("FFFFFF", "1F4E78", 20)
_ACCOUNT = ColumnStyle("000000", "BDD7EE")
_ITEMS = ColumnStyle("9C0006", "FFC7CE", 16)
_PRICE = ColumnStyle("006100", "C6EFCE")
_TERMS = ColumnStyle("9C5700", "FFEB9C", 14)
_GAP = ColumnStyle("000000", "FFFFFF", 4)
_NOTES = ColumnStyle("000000", "D9D9D9", 30)

# One entry per FIXED_HEADERS position.
FIXED_COLUMN_STYLES: Tuple[ColumnStyle, ...] = (
    _BASE,
    _ACCOUNT,
    _ACCOUNT,
    _ACCOUNT,
    _ACCOUNT,
    _ACCOUNT,
    _ACCOUNT,
    _ITEMS,
    _ITEMS,
    _ITEMS,
    _PRICE,
    _PRICE,
    _PRICE,
    _TERMS,
    _TERMS,
    _TERMS,
    _GAP,
    _GAP,
    _NOTES,
)
