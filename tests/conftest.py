"""Shared test fixtures."""

from __future__ import annotations

import pytest


# Stroked icons (24x24 viewBox, presentation attributes on the root)

CIRCLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle cx="12" cy="12" r="10"/>
</svg>'''

SMILEY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle cx="12" cy="12" r="10"/>
  <circle cx="8" cy="9" r="1"/>
  <circle cx="16" cy="9" r="1"/>
  <path d="M8 14s1.5 2 4 2 4-2 4-2"/>
</svg>'''

HOME_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <path d="M15 21v-8a1 1 0 0 0-1-1h-4a1 1 0 0 0-1 1v8"/>
  <path d="M3 10a2 2 0 0 1 .709-1.528l7-5.999a2 2 0 0 1 2.582 0l7 5.999A2 2 0 0 1 21 10v9a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z"/>
</svg>'''

BAR_CHART_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <line x1="18" x2="18" y1="20" y2="10"/>
  <line x1="12" x2="12" y1="20" y2="4"/>
  <line x1="6" x2="6" y1="20" y2="14"/>
</svg>'''


# Filled drawing scaled from a 100x100 viewBox onto 200x200 pixels

FILLED_SCALED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="200" height="200" viewBox="0 0 100 100">
  <rect x="10" y="10" width="80" height="80" fill="#4ECDC4"/>
  <circle cx="50" cy="50" r="20" fill="#FF6B6B"/>
</svg>'''


# Inkscape document: layers, a nested group, defs with gradient/filter/marker,
# a <use> of a defs template and a sodipodi arc

INKSCAPE_SVG = '''<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg"
     xmlns:xlink="http://www.w3.org/1999/xlink"
     xmlns:inkscape="http://www.inkscape.org/namespaces/inkscape"
     xmlns:sodipodi="http://sodipodi.sourceforge.net/DTD/sodipodi-0.0.dtd"
     width="400" height="300" viewBox="0 0 400 300">
  <defs>
    <linearGradient id="sky" x1="0%" y1="0%" x2="0%" y2="100%">
      <stop offset="0%" style="stop-color:#87ceeb;stop-opacity:1"/>
      <stop offset="100%" stop-color="white"/>
    </linearGradient>
    <radialGradient id="sun" xlink:href="#sky" fx="40%"/>
    <filter id="soft">
      <feGaussianBlur stdDeviation="2"/>
    </filter>
    <filter id="shadow">
      <feDropShadow dx="3" dy="4" stdDeviation="1.5" flood-color="black" flood-opacity="0.5"/>
    </filter>
    <marker id="arrow" refX="5" refY="5" markerWidth="6" markerHeight="6" orient="auto">
      <path d="M0,0 L10,5 L0,10 Z" fill="black"/>
    </marker>
    <rect id="tile" width="20" height="10" fill="orange"/>
  </defs>
  <g inkscape:groupmode="layer" inkscape:label="Background" id="layer1">
    <rect id="bg" x="0" y="0" width="400" height="300" fill="url(#sky)"/>
  </g>
  <g inkscape:groupmode="layer" inkscape:label="Shapes" id="layer2" transform="translate(10,20)">
    <circle id="sunDisk" cx="300" cy="60" r="40" style="fill:url(#sun);filter:url(#soft)"/>
    <g id="house" transform="translate(50,150)">
      <rect id="wall" width="100" height="80" fill="tan"/>
      <g id="roofGroup">
        <polygon id="roof" points="0,0 50,-40 100,0" fill="brown"/>
      </g>
    </g>
    <path id="blob" sodipodi:type="arc" sodipodi:cx="200" sodipodi:cy="200"
          sodipodi:rx="15" sodipodi:ry="10" d="M 215,200 A 15,10 0 1 1 185,200 A 15,10 0 1 1 215,200 Z"/>
    <line id="pointer" x1="20" y1="20" x2="80" y2="40" stroke="black" marker-end="url(#arrow)"/>
    <use id="tileCopy" xlink:href="#tile" x="5" y="7" filter="url(#shadow)"/>
  </g>
  <g inkscape:groupmode="layer" inkscape:label="Hidden" id="layer3" style="display:none">
    <text id="caption" x="200" y="280" font-size="18" text-anchor="middle">Hello <tspan>world</tspan></text>
  </g>
</svg>'''


# Text runs with character data after a <tspan> and styled runs

LABELS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="300" height="100" viewBox="0 0 300 100">
  <text id="greeting" x="10" y="40" font-size="20" fill="navy">Hello <tspan font-weight="bold">big</tspan> world</text>
  <g id="notes" fill="gray">
    <text id="note" x="10" y="80">a <tspan>b</tspan> c <tspan>d</tspan> e</text>
  </g>
</svg>'''


@pytest.fixture
def circle_svg() -> str:
    return CIRCLE_SVG


@pytest.fixture
def smiley_svg() -> str:
    return SMILEY_SVG


@pytest.fixture
def home_svg() -> str:
    return HOME_SVG


@pytest.fixture
def inkscape_svg() -> str:
    return INKSCAPE_SVG
