import pytest

from pattern_catalog.core import InvalidArgument
from pattern_catalog.creational.abstract_factory import (
    Application,
    LinuxUIFactory,
    MacUIFactory,
    WindowsUIFactory,
    create_ui_factory,
)


@pytest.mark.parametrize(
    "platform, factory_cls",
    [("Windows", WindowsUIFactory), ("macOS", MacUIFactory), ("Linux", LinuxUIFactory)],
)
def test_platform_lookup(narrator, platform, factory_cls):
    assert isinstance(create_ui_factory(platform, narrator), factory_cls)


def test_unsupported_platform(narrator):
    with pytest.raises(InvalidArgument) as info:
        create_ui_factory("BeOS", narrator)
    assert info.value.message == "Unsupported OS: BeOS"
    assert info.value.suggestions == ["Supported platforms: Windows, macOS, Linux"]


@pytest.mark.parametrize("factory_cls", [WindowsUIFactory, MacUIFactory, LinuxUIFactory])
def test_products_never_mix_families(narrator, factory_cls):
    app = Application(factory_cls(narrator))
    app.create_ui()
    assert app.styles == [factory_cls.theme]
    assert len(app.buttons) == len(app.text_fields) == len(app.checkboxes) == 2


def test_windows_render_and_interaction(narrator):
    app = Application(WindowsUIFactory(narrator))
    app.create_ui()
    app.render_ui()
    assert narrator.lines[1:] == [
        "",
        "Rendering Windows UI:",
        "-" * 24,
        "[Windows TextField: Username]",
        "[Windows TextField: Password]",
        "[Windows Checkbox: ☑]",
        "[Windows Checkbox: ☐]",
        "[Windows Button: OK]",
        "[Windows Button: Cancel]",
    ]
    app.simulate_interaction()
    assert "Windows button 'OK' clicked with mouse" in narrator
    assert "Text field updated to: john_doe" in narrator
    assert "Checkbox 2 is now: checked" in narrator
    assert app.buttons[0].clicks == 1


def test_mac_and_linux_rendering(narrator):
    for factory in (MacUIFactory(narrator), LinuxUIFactory(narrator)):
        button = factory.create_button("Go")
        button.render()
        button.on_click()
    assert narrator.lines == [
        "( Go )",
        "Mac button 'Go' clicked with trackpad",
        "< Go >",
        "Linux button 'Go' clicked",
    ]
