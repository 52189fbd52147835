from pattern_catalog.structural.bridge import (
    Circle,
    DirectXRenderer,
    EmailSender,
    House,
    Line,
    OpenGLRenderer,
    PushSender,
    Rectangle,
    SimpleNotification,
    SMSSender,
    SVGRenderer,
    UrgentNotification,
)


class TestShapesOverRenderers:
    def test_same_shape_different_renderers(self, narrator):
        circle = Circle(OpenGLRenderer(narrator), 10, 10, 5)
        circle.draw()
        circle.set_renderer(DirectXRenderer(narrator))
        circle.draw()
        assert narrator.lines == [
            "[OpenGL] Drawing circle at (10,10) with radius 5 in white",
            "[DirectX] Rendering circle: center=(10,10) r=5 color=white",
        ]
        assert circle.renderer_name == "DirectX"

    def test_color_is_renderer_state(self, narrator):
        renderer = OpenGLRenderer(narrator)
        Rectangle(renderer, 0, 0, 1, 1).set_color("blue")
        Line(renderer, 0, 0, 1, 1).draw()
        assert narrator.lines[-1].endswith("in blue")

    def test_svg_accumulates_elements(self, narrator):
        svg = SVGRenderer(narrator)
        Line(svg, 0, 0, 50, 50).draw()
        rect = Rectangle(svg, 1, 2, 3, 4)
        rect.resize(6, 8)
        rect.draw()
        assert svg.content.splitlines() == [
            "<svg>",
            '<line x1="0" y1="0" x2="50" y2="50" stroke="black"/>',
            '<rect x="1" y="2" width="6" height="8" fill="black"/>',
            "</svg>",
        ]

    def test_house_uses_only_primitives(self, narrator):
        svg = SVGRenderer(narrator)
        House(svg, 50, 50).draw()
        assert len(svg.elements) == 5
        assert svg.color == "lightblue"


class TestNotifications:
    def test_simple_and_urgent_share_senders(self, narrator):
        email = EmailSender(narrator)
        SimpleNotification(email, "Hello", "World").send()
        UrgentNotification(email, "Down", "Server offline").send()
        assert email.sent == 2
        assert "[EMAIL] Subject: 🚨 URGENT: Down" in narrator
        assert "[EMAIL] Body: ⚠️ Server offline ⚠️" in narrator

    def test_sms_truncates_long_text(self, narrator):
        SimpleNotification(SMSSender(narrator), "T", "x" * 300).send()
        line = narrator.lines[-1]
        body = line[len("[SMS] "): -len(" (160 char limit)")]
        assert len(body) == 160
        assert body.endswith("...")

    def test_channel_comes_from_sender(self, narrator):
        assert SimpleNotification(PushSender(narrator), "a", "b").channel == "Push Notification"
