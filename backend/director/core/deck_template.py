"""
Deterministic HTML renderer for generated pitch decks.

Takes the ordered ``PitchDeckSlide`` list and produces a self-contained HTML
presentation with:
- a text column and a visual column per slide (generated image as an inline
  data URI)
- proportional bar charts for slides that carry chart data
- keyboard, click and ``#slide-N`` hash navigation
- a progress bar and slide counter
"""

from __future__ import annotations

import base64
import html as html_mod
from collections.abc import Sequence

from director.schemas.deck_content import ChartPoint, LayoutType, PitchDeckSlide


def _e(text: str | None) -> str:
    """HTML-escape helper."""
    return html_mod.escape(text or "")


def _paragraphs(content: str) -> str:
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    return "\n".join(f"<p>{_e(line)}</p>" for line in lines)


def _figure(slide: PitchDeckSlide) -> str:
    if not slide.image:
        return '<div class="visual visual-empty"></div>'
    encoded = base64.b64encode(slide.image).decode("ascii")
    return (
        f'<figure class="visual"><img alt="{_e(slide.title)}" '
        f'src="data:{_e(slide.image_mime_type)};base64,{encoded}"></figure>'
    )


def _render_chart(points: Sequence[ChartPoint]) -> str:
    peak = max(p.value for p in points) or 1.0
    rows = []
    for p in points:
        pct = round(p.value / peak * 100, 1)
        rows.append(
            f'<li><span class="lbl">{_e(p.label)}</span>'
            f'<span class="bar"><i style="--w:{pct}%"></i></span>'
            f'<b>{p.value:g}</b></li>'
        )
    return f'<ol class="chart">{"".join(rows)}</ol>'


def _render_slide(slide: PitchDeckSlide, index: int, total: int) -> str:
    heading_tag = "h1" if slide.layout_type == LayoutType.title else "h2"
    chart = _render_chart(slide.chart_data) if slide.chart_data else ""

    return f"""
  <section class="slide layout-{slide.layout_type.value.lower()}" id="slide-{index + 1}" data-slide="{index}">
    <div class="copy">
      <header><span class="kicker">{_e(slide.layout_type.value)}</span><span class="num">{index + 1:02d}/{total:02d}</span></header>
      <{heading_tag}>{_e(slide.title)}</{heading_tag}>
      <div class="body">{_paragraphs(slide.content)}</div>
      {chart}
    </div>
    {_figure(slide)}
  </section>"""


_STYLE = """
:root { --bg: #0b0b0e; --panel: #141419; --ink: #f5f5f7; --muted: #a3a3a3; --accent: #3b82f6; }
* { box-sizing: border-box; margin: 0; padding: 0; }
body { background: var(--bg); color: var(--ink); font: 16px/1.55 system-ui, -apple-system, 'Segoe UI', sans-serif; overflow: hidden; }
#progress { position: fixed; top: 0; left: 0; height: 3px; background: var(--accent); transition: width .3s; z-index: 10; }
#counter { position: fixed; bottom: 18px; right: 24px; font-size: 12px; color: var(--muted); z-index: 10; }
.slide { display: none; height: 100vh; grid-template-columns: 1.1fr 1fr; gap: 4vw; padding: 7vh 6vw; align-items: center; }
.slide.current { display: grid; }
.layout-title { grid-template-columns: 1fr; text-align: center; }
.layout-title .visual { display: none; }
.copy header { display: flex; justify-content: space-between; margin-bottom: 18px; font-size: 11px; letter-spacing: .18em; text-transform: uppercase; }
.kicker { color: var(--accent); font-weight: 800; }
.num { color: var(--muted); }
h1 { font-size: clamp(40px, 7vw, 88px); font-weight: 900; letter-spacing: -.03em; }
h2 { font-size: clamp(28px, 4vw, 50px); font-weight: 800; letter-spacing: -.02em; margin-bottom: 18px; }
.body p { color: var(--muted); margin-bottom: 8px; font-size: clamp(15px, 1.4vw, 19px); }
.visual { height: 72vh; border-radius: 20px; overflow: hidden; background: var(--panel); }
.visual img { width: 100%; height: 100%; object-fit: cover; }
.chart { list-style: none; margin-top: 26px; display: grid; gap: 10px; }
.chart li { display: grid; grid-template-columns: 130px 1fr 70px; gap: 12px; align-items: center; font-size: 13px; }
.chart .lbl { color: var(--muted); }
.chart .bar { height: 10px; border-radius: 5px; background: rgba(255,255,255,.07); overflow: hidden; }
.chart .bar i { display: block; height: 100%; width: var(--w); background: var(--accent); }
.chart b { text-align: right; }
"""

_SCRIPT = """
(function () {
  var slides = Array.prototype.slice.call(document.querySelectorAll('.slide'));
  if (!slides.length) { return; }
  var bar = document.getElementById('progress');
  var counter = document.getElementById('counter');
  var at = 0;

  function show(n) {
    n = Math.max(0, Math.min(slides.length - 1, n));
    slides[at].classList.remove('current');
    at = n;
    slides[at].classList.add('current');
    bar.style.width = ((at + 1) / slides.length * 100) + '%';
    counter.textContent = (at + 1) + ' / ' + slides.length;
    history.replaceState(null, '', '#slide-' + (at + 1));
  }

  var keys = { ArrowRight: 1, ArrowDown: 1, PageDown: 1, ' ': 1, ArrowLeft: -1, ArrowUp: -1, PageUp: -1 };
  document.addEventListener('keydown', function (e) {
    if (e.key === 'Home') { show(0); return; }
    if (e.key === 'End') { show(slides.length - 1); return; }
    if (keys[e.key]) { e.preventDefault(); show(at + keys[e.key]); }
  });
  document.addEventListener('click', function (e) {
    show(at + (e.clientX > window.innerWidth / 3 ? 1 : -1));
  });

  var start = parseInt((location.hash.match(/^#slide-(\\d+)$/) || [])[1] || '1', 10) - 1;
  slides[0].classList.add('current');
  show(start);
})();
"""


def render_pitch_deck(slides: Sequence[PitchDeckSlide], project_name: str) -> str:
    """Render the slide list into a self-contained HTML presentation, in order."""
    total = len(slides)
    sections = "".join(_render_slide(slide, i, total) for i, slide in enumerate(slides))

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="UTF-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"<title>{_e(project_name)} | Pitch Deck</title>\n"
        f"<style>{_STYLE}</style>\n</head>\n<body>\n"
        '<div id="progress"></div>\n'
        f'<div id="counter">1 / {total}</div>\n'
        f'<main class="deck">{sections}\n</main>\n'
        f"<script>{_SCRIPT}</script>\n</body>\n</html>\n"
    )
