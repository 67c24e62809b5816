"""Fixtures and configuration for pytest."""

import textwrap
from pathlib import Path

import pytest


def oso(text: str) -> str:
    """Dedent an inline OSO snippet."""
    return textwrap.dedent(text).lstrip("\n")


@pytest.fixture
def simple_oso() -> str:
    """A minimal surface shader with one float parameter."""
    return oso(
        """
        OpenShadingLanguage 1.12
        surface simple
        param float Kd 0.5
        code ___main___
        """
    )


@pytest.fixture
def lambert_oso() -> str:
    """A 3Delight-style shader mixing defaults, hints and output parameters."""
    return (
        "OpenShadingLanguage 1.00\n"
        "# Compiled by oslc 1.12.6\n"
        '# options: -q -o lambert.oso\n'
        "surface lambert\t%meta{string,help,\"Lambertian diffuse\"}\n"
        "param\tcolor\ti_color\t0.5 0.5 0.5\t%meta{string,label,\"Color\"} "
        "%read{2,2} %write{2147483647,-1}\n"
        "param\tcolor\ttransparency\t0 0 0\t%meta{string,label,\"Transparency\"}\n"
        "param\tfloat\ti_diffuse\t0.800000012\t%meta{float,min,0} "
        "%meta{float,max,1}\n"
        "param\tint\trefractions\t0\t%meta{string,widget,\"checkBox\"}\n"
        "param\tnormal\tnormalCamera\t0 0 0\t%initexpr %space{\"world\"}\n"
        "oparam\tcolor\toutColor\t0 0 0\t%read{2147483647,-1} %write{5,5}\n"
        "global\tnormal\tN\t%read{1,1} %write{2147483647,-1}\n"
        "local\tfloat\tKd\t%read{3,3} %write{2,2}\n"
        "const\tfloat\t$const1\t0.5\t\t%read{4,4} %write{2147483647,-1}\n"
        "temp\tcolor\t$tmp1\t%read{5,5} %write{4,4}\n"
        "code ___main___\n"
        "# lambert.osl:12\n"
        "\tmul\t$tmp1 i_color $const1 \t%filename{\"lambert.osl\"} %line{12}\n"
        "\tend\n"
    )


@pytest.fixture
def write_oso(tmp_path: Path):
    """Write OSO text to a file under a temporary directory."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write
