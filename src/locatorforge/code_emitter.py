from __future__ import annotations

from enum import Enum
import re
from typing import Callable, Sequence, Union

from .models import AnalysisResult, Flow, Locator, Step


class Framework(str, Enum):
    PLAYWRIGHT = "playwright"
    SELENIUM = "selenium"
    CYPRESS = "cypress"
    WEBDRIVERIO = "webdriverio"
    TESTCAFE = "testcafe"

    @property
    def label(self) -> str:
        return _FRAMEWORK_LABELS[self]

    @classmethod
    def parse(cls, value: str | Framework | None) -> Framework | None:
        if isinstance(value, Framework):
            return value
        normalized = re.sub(r"[\s_-]+", "", str(value or "")).lower()
        for framework in cls:
            if framework.value == normalized:
                return framework
        return None


_FRAMEWORK_LABELS = {
    Framework.PLAYWRIGHT: "Playwright",
    Framework.SELENIUM: "Selenium",
    Framework.CYPRESS: "Cypress",
    Framework.WEBDRIVERIO: "WebdriverIO",
    Framework.TESTCAFE: "TestCafe",
}

GHERKIN = "gherkin"

_REGEX_SPECIALS = re.compile(r"[\\^$.*+?()\[\]{}/]")

EmitTarget = Union[AnalysisResult, Flow, Sequence[Flow], Locator]


def unsupported_framework_message(name: object) -> str:
    return f'// Framework "{name}" not supported'


def emit(target: EmitTarget, framework: str | Framework, url: str = "") -> str:
    """Render ``target`` for ``framework``; unknown frameworks yield a comment."""
    if isinstance(framework, str) and framework.strip().lower() == GHERKIN:
        if isinstance(target, Locator):
            return unsupported_framework_message(framework)
        source_url, flows = _flows_of(target, url)
        return emit_gherkin(source_url, flows)

    resolved = Framework.parse(framework)
    if resolved is None:
        return unsupported_framework_message(framework)
    if isinstance(target, Locator):
        return emit_locator_code(target, resolved)
    source_url, flows = _flows_of(target, url)
    return emit_flow_code(source_url, flows, resolved)


def _flows_of(target: AnalysisResult | Flow | Sequence[Flow], url: str) -> tuple[str, list[Flow]]:
    if isinstance(target, AnalysisResult):
        return target.url, list(target.flows)
    if isinstance(target, Flow):
        return url, [target]
    return url, list(target)


# Gherkin


def emit_gherkin(url: str, flows: Sequence[Flow]) -> str:
    header = f"Feature: Website Testing for {url}\n\n"
    if not flows:
        return header + "No flows detected for this website."
    scenarios = ["\n".join(_gherkin_scenario(flow)) + "\n" for flow in flows]
    return header + "\n".join(scenarios)


def _gherkin_scenario(flow: Flow) -> list[str]:
    lines = [f"  Scenario: {flow.title}"]
    seen_action = False
    for step in flow.steps:
        if step.action == "navigate":
            keyword = "Given"
        elif step.action == "assert":
            keyword = "Then"
        else:
            keyword = "And" if seen_action else "When"
            seen_action = True
        lines.append(f"    {keyword} {_gherkin_text(step)}")
    return lines


def _gherkin_text(step: Step) -> str:
    match step.action:
        case "navigate":
            return f'the user navigates to "{step.locator}"'
        case "fill":
            return f'the user fills "{step.locator}" with "{step.value or ""}"'
        case "click":
            return f'the user clicks "{step.locator}"'
        case "select":
            return f'the user selects "{step.value or ""}" from "{step.locator}"'
        case "check":
            return f'the user checks "{step.locator}"'
        case "assert":
            return f'the user should see "{step.expected or ""}" in "{step.locator}"'
    raise ValueError(f"Unsupported step action: {step.action}")


# Framework code


def emit_flow_code(url: str, flows: Sequence[Flow], framework: Framework) -> str:
    if not flows:
        return f"// No flows detected for {url}"
    renderer = _FLOW_RENDERERS[framework]
    return renderer(url, flows)


def render_step(step: Step, framework: Framework) -> str:
    return _STEP_RENDERERS[framework](step)


def _js(value: str | None, quote: str = "'") -> str:
    text = (value or "").replace("\\", "\\\\").replace(quote, f"\\{quote}")
    return text.replace("\n", "\\n")


def _java(value: str | None) -> str:
    return _js(value, '"')


def _alternation(expected: str | None) -> str | None:
    text = expected or ""
    if "|" not in text:
        return None
    options = [_REGEX_SPECIALS.sub(r"\\\g<0>", option) for option in text.split("|")]
    return "|".join(options)


def _playwright_step(step: Step) -> str:
    locator = _js(step.locator)
    match step.action:
        case "navigate":
            return f"await page.goto('{locator}');"
        case "fill":
            return f"await page.fill('{locator}', '{_js(step.value)}');"
        case "click":
            return f"await page.click('{locator}');"
        case "select":
            return f"await page.selectOption('{locator}', '{_js(step.value)}');"
        case "check":
            return f"await page.check('{locator}');"
        case "assert":
            pattern = _alternation(step.expected)
            if pattern is not None:
                return f"await expect(page.locator('{locator}')).toContainText(/{pattern}/i);"
            return f"await expect(page.locator('{locator}')).toContainText('{_js(step.expected)}');"
    raise ValueError(f"Unsupported step action: {step.action}")


def _selenium_step(step: Step) -> str:
    element = f'driver.findElement(By.cssSelector("{_java(step.locator)}"))'
    match step.action:
        case "navigate":
            return f'driver.get("{_java(step.locator)}");'
        case "fill":
            return f'{element}.sendKeys("{_java(step.value)}");'
        case "click":
            return f"{element}.click();"
        case "select":
            return f'new Select({element}).selectByVisibleText("{_java(step.value)}");'
        case "check":
            return f"if (!{element}.isSelected()) {{ {element}.click(); }}"
        case "assert":
            pattern = _alternation(step.expected)
            if pattern is not None:
                return (
                    f'assertTrue(Pattern.compile("{_java(pattern)}", Pattern.CASE_INSENSITIVE)'
                    f".matcher({element}.getText()).find());"
                )
            return f'assertTrue({element}.getText().contains("{_java(step.expected)}"));'
    raise ValueError(f"Unsupported step action: {step.action}")


def _cypress_step(step: Step) -> str:
    locator = _js(step.locator)
    match step.action:
        case "navigate":
            return f"cy.visit('{locator}');"
        case "fill":
            return f"cy.get('{locator}').type('{_js(step.value)}');"
        case "click":
            return f"cy.get('{locator}').click();"
        case "select":
            return f"cy.get('{locator}').select('{_js(step.value)}');"
        case "check":
            return f"cy.get('{locator}').check();"
        case "assert":
            pattern = _alternation(step.expected)
            if pattern is not None:
                return f"cy.get('{locator}').invoke('text').should('match', /{pattern}/i);"
            return f"cy.get('{locator}').should('contain', '{_js(step.expected)}');"
    raise ValueError(f"Unsupported step action: {step.action}")


def _webdriverio_step(step: Step) -> str:
    locator = _js(step.locator)
    match step.action:
        case "navigate":
            return f"await browser.url('{locator}');"
        case "fill":
            return f"await $('{locator}').setValue('{_js(step.value)}');"
        case "click":
            return f"await $('{locator}').click();"
        case "select":
            return f"await $('{locator}').selectByVisibleText('{_js(step.value)}');"
        case "check":
            return f"await $('{locator}').click();"
        case "assert":
            pattern = _alternation(step.expected)
            if pattern is not None:
                return f"await expect($('{locator}')).toHaveText(expect.stringMatching(/{pattern}/i));"
            return f"await expect($('{locator}')).toHaveText(expect.stringContaining('{_js(step.expected)}'));"
    raise ValueError(f"Unsupported step action: {step.action}")


def _testcafe_step(step: Step) -> str:
    locator = _js(step.locator)
    match step.action:
        case "navigate":
            return f"await t.navigateTo('{locator}');"
        case "fill":
            return f"await t.typeText(Selector('{locator}'), '{_js(step.value)}');"
        case "click":
            return f"await t.click(Selector('{locator}'));"
        case "select":
            return (
                f"await t.click(Selector('{locator}'))"
                f".click(Selector('{locator}').find('option').withText('{_js(step.value)}'));"
            )
        case "check":
            return f"await t.click(Selector('{locator}'));"
        case "assert":
            pattern = _alternation(step.expected)
            if pattern is not None:
                return f"await t.expect(Selector('{locator}').innerText).match(/{pattern}/i);"
            return f"await t.expect(Selector('{locator}').innerText).contains('{_js(step.expected)}');"
    raise ValueError(f"Unsupported step action: {step.action}")


_STEP_RENDERERS: dict[Framework, Callable[[Step], str]] = {
    Framework.PLAYWRIGHT: _playwright_step,
    Framework.SELENIUM: _selenium_step,
    Framework.CYPRESS: _cypress_step,
    Framework.WEBDRIVERIO: _webdriverio_step,
    Framework.TESTCAFE: _testcafe_step,
}


def _indent(lines: Sequence[str], depth: int) -> list[str]:
    prefix = "  " * depth
    return [f"{prefix}{line}" for line in lines]


def _step_lines(flow: Flow, framework: Framework) -> list[str]:
    return [render_step(step, framework) for step in flow.steps]


def _playwright_file(url: str, flows: Sequence[Flow]) -> str:
    lines = ["import { test, expect } from '@playwright/test';", ""]
    for flow in flows:
        lines.append(f"test('{_js(flow.title)}', async ({{ page }}) => {{")
        lines.extend(_indent(_step_lines(flow, Framework.PLAYWRIGHT), 1))
        lines.extend(["});", ""])
    return "\n".join(lines)


def _selenium_file(url: str, flows: Sequence[Flow]) -> str:
    lines = [
        "import static org.junit.Assert.assertTrue;",
        "",
        "import java.util.regex.Pattern;",
        "import org.junit.After;",
        "import org.junit.Before;",
        "import org.junit.Test;",
        "import org.openqa.selenium.By;",
        "import org.openqa.selenium.WebDriver;",
        "import org.openqa.selenium.chrome.ChromeDriver;",
        "import org.openqa.selenium.support.ui.Select;",
        "",
        "public class WebsiteTest {",
        "    private WebDriver driver;",
        "",
        "    @Before",
        "    public void setUp() {",
        "        driver = new ChromeDriver();",
        "    }",
        "",
        "    @After",
        "    public void tearDown() {",
        "        driver.quit();",
        "    }",
    ]
    for flow in flows:
        lines.extend(["", "    @Test", f"    public void {java_method_name(flow.title)}() {{"])
        lines.extend(f"        {line}" for line in _step_lines(flow, Framework.SELENIUM))
        lines.append("    }")
    lines.extend(["}", ""])
    return "\n".join(lines)


def _cypress_file(url: str, flows: Sequence[Flow]) -> str:
    lines = [f"describe('Website Testing for {_js(url)}', () => {{"]
    for flow in flows:
        lines.append(f"  it('{_js(flow.title)}', () => {{")
        lines.extend(_indent(_step_lines(flow, Framework.CYPRESS), 2))
        lines.append("  });")
    lines.extend(["});", ""])
    return "\n".join(lines)


def _webdriverio_file(url: str, flows: Sequence[Flow]) -> str:
    lines = [f"describe('Website Testing for {_js(url)}', () => {{"]
    for flow in flows:
        lines.append(f"  it('{_js(flow.title)}', async () => {{")
        lines.extend(_indent(_step_lines(flow, Framework.WEBDRIVERIO), 2))
        lines.append("  });")
    lines.extend(["});", ""])
    return "\n".join(lines)


def _testcafe_file(url: str, flows: Sequence[Flow]) -> str:
    lines = [
        "import { Selector } from 'testcafe';",
        "",
        f"fixture('Website Testing for {_js(url)}').page('{_js(url)}');",
        "",
    ]
    for flow in flows:
        lines.append(f"test('{_js(flow.title)}', async t => {{")
        lines.extend(_indent(_step_lines(flow, Framework.TESTCAFE), 1))
        lines.extend(["});", ""])
    return "\n".join(lines)


_FLOW_RENDERERS: dict[Framework, Callable[[str, Sequence[Flow]], str]] = {
    Framework.PLAYWRIGHT: _playwright_file,
    Framework.SELENIUM: _selenium_file,
    Framework.CYPRESS: _cypress_file,
    Framework.WEBDRIVERIO: _webdriverio_file,
    Framework.TESTCAFE: _testcafe_file,
}


def java_method_name(title: str) -> str:
    words = re.findall(r"[A-Za-z0-9]+", title)
    if not words:
        return "generatedFlow"
    name = words[0].lower() + "".join(word[:1].upper() + word[1:].lower() for word in words[1:])
    if name[0].isdigit():
        name = f"flow{name}"
    return name


# Single locator snippets


def emit_locator_code(locator: Locator, framework: str | Framework) -> str:
    resolved = Framework.parse(framework)
    if resolved is None:
        return unsupported_framework_message(framework)
    css_js = _js(locator.css_selector)
    xpath_js = _js(locator.xpath)
    match resolved:
        case Framework.PLAYWRIGHT:
            return "\n".join(
                [
                    "// Playwright locators",
                    f"await page.locator('{css_js}').click();",
                    "// or using XPath",
                    f"await page.locator('xpath={xpath_js}').click();",
                ]
            )
        case Framework.SELENIUM:
            return "\n".join(
                [
                    "// Selenium WebDriver (Java)",
                    f'driver.findElement(By.cssSelector("{_java(locator.css_selector)}")).click();',
                    "// or using XPath",
                    f'driver.findElement(By.xpath("{_java(locator.xpath)}")).click();',
                ]
            )
        case Framework.CYPRESS:
            return "\n".join(
                [
                    "// Cypress",
                    f"cy.get('{css_js}').click();",
                    "// Note: Cypress doesn't support XPath natively",
                ]
            )
        case Framework.WEBDRIVERIO:
            return "\n".join(
                [
                    "// WebdriverIO",
                    f"await $('{css_js}').click();",
                    "// or using XPath",
                    f"await $('{xpath_js}').click();",
                ]
            )
        case Framework.TESTCAFE:
            return "\n".join(
                [
                    "// TestCafe",
                    f"await t.click(Selector('{css_js}'));",
                    "// Note: TestCafe uses CSS selectors primarily",
                ]
            )
    return unsupported_framework_message(framework)
