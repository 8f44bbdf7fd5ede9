#!/usr/bin/env python3
"""
Quick Start Guide for Render Markup.

This example walks through the main features: builtin HTML tags, host
elements described by element info, custom component renderers, named
children, fragments, deep embedding and boxed references.
"""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from render_markup import CompilerConfig, ElementInfoRegistry, MarkupCompiler, RendererRegistry, box
from render_markup.shared.errors import TransformError


def build_registries():
    """Register the renderers and element info used by the walkthrough."""
    renderers = RendererRegistry()
    element_info = ElementInfoRegistry()

    element_info.register("textfield", {"#type": "textfield"})
    element_info.register("form", {"#type": "form"})

    @renderers.component("x-greeting", provider="demo")
    def greeting(props, value):
        return {"#type": "markup", "#markup": f"<h2>Hello, {props.get('who', 'world')}</h2>"}

    @renderers.component("x-card", provider="demo")
    def card(props, value):
        # Asks for its markup children to be placed inside the body
        return {
            "#type": "container",
            "#attributes": {"data-deep-embed": "1", "class": ["card"]},
            "body": {"#type": "container", "#attributes": {"class": ["card-body"]}},
        }

    @renderers.component("x-list", provider="demo")
    def item_list(props, value):
        items = props["items"].value
        return {"#type": "item_list", "#items": items, "#title": value}

    return renderers, element_info


def show(title, tree):
    print(f"\n{title}")
    print("-" * len(title))
    print(json.dumps(tree, indent=2, default=str))


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - Render Markup")
    print("=" * 45)

    renderers, element_info = build_registries()
    compiler = MarkupCompiler(renderers, element_info)

    show("Step 1: Builtin HTML tags", compiler.render('<p class="lead">Fish &amp; chips</p>'))

    show(
        "Step 2: Host elements and named children",
        compiler.render(
            '<drupal:form id="contact">'
            '<drupal:textfield name="email" title="Email" onchange="check()"/>'
            '</drupal:form>'
        ),
    )

    show("Step 3: Custom components", compiler.render('<x-greeting who="reader"/>'))

    show("Step 4: Fragments", compiler.render('<x-greeting name="a"/><x-greeting name="b"/>'))

    show("Step 5: Deep embedding", compiler.render("<x-card><p>Inside the body</p></x-card>"))

    with compiler.compilation() as context:
        token = box(["first", "second"])
        show(
            "Step 6: Boxed references",
            compiler.render(f'<x-list items="{token}">Things</x-list>'),
        )
        print(f"Correlation ID: {context.correlation_id}")

    print("\nStep 7: Strict and lenient compilation")
    print("-" * 38)
    try:
        compiler.render("<x-unknown/>")
    except TransformError as e:
        print(f"Strict: {e}")
    lenient = MarkupCompiler(renderers, element_info, config=CompilerConfig.lenient())
    print(f"Lenient: {lenient.render('<x-unknown/>')['#type']}")

    result = compiler.compile("<div><p></div>")
    print(f"\nMalformed markup: success={result.success}, tree={result.tree}")


if __name__ == "__main__":
    quick_start_example()
