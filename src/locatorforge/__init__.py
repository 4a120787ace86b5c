from __future__ import annotations

from .code_emitter import Framework, emit, emit_flow_code, emit_gherkin, emit_locator_code
from .dom_extractor import extract_elements
from .flow_inference import infer_flows
from .history import LocatorHistory
from .inspector import LivePageSession, LocatorInspector, inspect_element
from .locator_generator import synthesize
from .models import AnalysisResult, Element, Flow, InspectionResult, Locator, LocatorQuality, Step
from .scraper import analyze_markup, analyze_url

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "Element",
    "Flow",
    "Framework",
    "InspectionResult",
    "LivePageSession",
    "Locator",
    "LocatorHistory",
    "LocatorInspector",
    "LocatorQuality",
    "Step",
    "analyze_markup",
    "analyze_url",
    "emit",
    "emit_flow_code",
    "emit_gherkin",
    "emit_locator_code",
    "extract_elements",
    "infer_flows",
    "inspect_element",
    "synthesize",
]
