import subprocess
import unittest
from unittest.mock import patch

from vc_daily_report.publish.plain_text import copy_to_clipboard, markdown_to_plain_text


REPORT = """## 工作内容

### 支付服务

1. **【新增】** 支持 *退款* 回调
2. 【修复】修复 `OrderService` 空指针，详见 [MR !12](https://gitlab.example.com/mr/12)



```python
print("hi")
```
"""


class TestMarkdownToPlainText(unittest.TestCase):
    def test_strips_markdown(self) -> None:
        text = markdown_to_plain_text(REPORT)

        self.assertEqual(
            text,
            "工作内容\n\n支付服务\n\n"
            "1. 【新增】 支持 退款 回调\n"
            "2. 【修复】修复 OrderService 空指针，详见 MR !12\n\n"
            'print("hi")',
        )

    def test_collapses_blank_lines_and_trims(self) -> None:
        self.assertEqual(markdown_to_plain_text("\n\na\n\n\n\n\nb\n\n"), "a\n\nb")

    def test_idempotent(self) -> None:
        samples = [
            REPORT,
            "# Title\n__bold__ and _it_ and ***both***",
            "snake_case_name stays, 2 * 3 * 4",
            "![logo](x.png) plain",
            "[## 支付服务](https://x)\n1. fix",
            "**# 标题**\n`## code`",
        ]
        for sample in samples:
            once = markdown_to_plain_text(sample)
            self.assertEqual(markdown_to_plain_text(once), once)

    def test_heading_inside_link_text(self) -> None:
        self.assertEqual(markdown_to_plain_text("[## 支付服务](https://x)\n1. fix"), "支付服务\n1. fix")

    def test_underscores_inside_words_are_kept(self) -> None:
        self.assertEqual(markdown_to_plain_text("update user_id field"), "update user_id field")

    def test_empty(self) -> None:
        self.assertEqual(markdown_to_plain_text(""), "")


class TestCopyToClipboard(unittest.TestCase):
    @patch("vc_daily_report.publish.plain_text._clipboard_command", return_value=["pbcopy"])
    @patch("vc_daily_report.publish.plain_text.subprocess.run")
    def test_copy_success(self, mock_run, _mock_command):
        self.assertTrue(copy_to_clipboard("日报"))
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["pbcopy"])
        self.assertEqual(kwargs["input"], "日报")

    @patch("vc_daily_report.publish.plain_text._clipboard_command", return_value=["xclip", "-selection", "clipboard"])
    @patch("vc_daily_report.publish.plain_text.subprocess.run")
    def test_copy_failure_degrades(self, mock_run, _mock_command):
        mock_run.side_effect = subprocess.CalledProcessError(1, "xclip")
        self.assertFalse(copy_to_clipboard("日报"))

    @patch("vc_daily_report.publish.plain_text._clipboard_command", return_value=["pbcopy"])
    @patch("vc_daily_report.publish.plain_text.subprocess.run")
    def test_missing_tool_degrades(self, mock_run, _mock_command):
        mock_run.side_effect = FileNotFoundError("pbcopy")
        self.assertFalse(copy_to_clipboard("日报"))

    @patch("vc_daily_report.publish.plain_text._clipboard_command", return_value=None)
    def test_no_tool_available(self, _mock_command):
        self.assertFalse(copy_to_clipboard("日报"))


if __name__ == "__main__":
    unittest.main()
