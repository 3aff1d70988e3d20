"""
UI strings for Calculator 3
English text doubles as the lookup key; other languages map it to a translation.
"""

_MONTHS_EN = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

TRANSLATIONS = {
    "zh": {
        "Calculator 3": "博学堂计算器3.0",
        "History": "历史记录",
        "No history yet": "暂无历史记录",
        "History unavailable": "历史记录不可用",
        "Calculation error": "计算错误",
        "Invalid math expression": "无效的数学表达式",
        "Cannot divide by zero": "不能除以零",
        "Mismatched parentheses": "括号不匹配",
        "Delete": "删除",
        "Memo": "备注",
        "Memo: {}": "备注：{}",
        "Copy": "复制",
        "Copied": "已复制",
        "Enter a memo": "输入备注内容",
        "Save": "保存",
        "Cancel": "取消",
        "Memo saved": "备注已保存",
        "Failed to save memo": "保存备注失败",
        "Entry deleted": "已删除",
        "Could not save history": "无法保存历史记录",
        "Dark mode": "深色模式",
        "Language": "语言",
    },
}


def get_translator(language):
    """Return tr(text) for the language; unknown keys fall back to English."""
    table = TRANSLATIONS.get(language, {})

    def tr(text):
        return table.get(text, text)

    return tr


def format_long_date(day, language="en"):
    """Long-form calendar date used as a history section header."""
    if language == "zh":
        return f"{day.year}年{day.month}月{day.day}日"
    return f"{_MONTHS_EN[day.month - 1]} {day.day}, {day.year}"
