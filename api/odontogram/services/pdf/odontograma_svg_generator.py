# api/odontogram/services/pdf/odontograma_svg_generator.py
"""
Generador del odontograma 2D como SVG vectorial a partir del estado
derivado de cada pieza (ver estado_diente_service).

Cada celda muestra:
  - superficies afectadas (o la corona completa) con el color dominante
  - glifo de la condición cuando afecta a la pieza completa
  - contador de condiciones en la esquina superior (si hay 2 o más)
  - punto de estado del tratamiento en la esquina inferior
  - barra de rango para puentes
"""
from __future__ import annotations

import io

from api.odontogram.constants import (
    CATALOGO_CONDICIONES,
    COLOR_ESTADO,
    EstadoTratamiento,
    FDIConstants,
    SIN_COLOR,
    TipoCondicion,
)


# ─────────────────────────────────────────────────────────────────────────────
# LAYOUT
# ─────────────────────────────────────────────────────────────────────────────
TW       = 40
TH       = 40
GAP_H    = 4
BADGE_H  = 13
RANGE_H  = 4
ROW_GAP  = 16
ARC_GAP  = 30
PAD_X    = 18
PAD_Y    = 14
TITLE_H  = 24
LEGEND_ROW_H = 16
LEGEND_COLS  = 4

# Backend C de renderPM (paquete rl-renderPM)
RENDERPM_BACKEND = "_renderPM"

# ─────────────────────────────────────────────────────────────────────────────
# PALETA
# ─────────────────────────────────────────────────────────────────────────────
C_NEGRO        = "#1A202C"
C_GRIS         = "#718096"
C_BORDE        = "#CBD5E0"
C_CROWN_STROKE = "#4A5568"
C_CROWN_FILL   = "#FFFFFF"
C_BADGE_BG     = "#FFFFFF"
C_BADGE_FG     = "#1A202C"
C_CONTADOR_BG  = "#1F2937"
C_CONTADOR_FG  = "#FFFFFF"

# Superficie del catálogo -> trazo del gráfico. Lo que no está aquí
# (cervical, completa) pinta la corona entera.
_SURFACE_NORM: dict[str, str] = {
    "oclusal":    "O",
    "incisal":    "O",
    "vestibular": "V",
    "lingual":    "L",
    "mesial":     "M",
    "distal":     "D",
}

# ─────────────────────────────────────────────────────────────────────────────
# FILAS: (arcada, superior)
# ─────────────────────────────────────────────────────────────────────────────
FILAS: list[tuple[str, bool]] = [
    ("superior_permanente", True),
    ("superior_temporal",   True),
    ("inferior_temporal",   False),
    ("inferior_permanente", False),
]

# ─────────────────────────────────────────────────────────────────────────────
# PATHS
# ─────────────────────────────────────────────────────────────────────────────

_PATH_OUTLINE = (
    "M 0.1524,0.1448 "
    "C 0.2441,0.0531 0.3710,0.0005 0.5007,0.0005 "
    "C 0.6304,0.0005 0.7573,0.0531 0.8490,0.1448 "
    "C 0.9473,0.2427 0.9998,0.3695 0.9998,0.4993 "
    "C 0.9998,0.6290 0.9473,0.7559 0.8490,0.8545 "
    "C 0.7573,0.9462 0.6304,0.9988 0.5007,0.9988 "
    "C 0.3710,0.9988 0.2441,0.9462 0.1524,0.8545 "
    "C 0.0533,0.7559 0.0007,0.6290 0.0007,0.4993 "
    "C 0.0007,0.3695 0.0533,0.2427 0.1524,0.1448 Z"
)

_SURFACE_PATHS: dict[str, str] = {

    "O": (
        "M 0.5007,0.2692 "
        "C 0.6244,0.2692 0.7308,0.3756 0.7308,0.4993 "
        "C 0.7308,0.6230 0.6244,0.7294 0.5007,0.7294 "
        "C 0.3769,0.7294 0.2706,0.6230 0.2706,0.4993 "
        "C 0.2706,0.3756 0.3769,0.2692 0.5007,0.2692 Z"
    ),

    # Vestibular: arco superior
    "V": (
        "M 0.1524,0.1448 "
        "C 0.2441,0.0531 0.3710,0.0005 0.5007,0.0005 "
        "C 0.6304,0.0005 0.7573,0.0531 0.8490,0.1448 "
        "L 0.6713,0.3225 "
        "C 0.6264,0.2776 0.5643,0.2518 0.5007,0.2518 "
        "C 0.4372,0.2518 0.3750,0.2776 0.3301,0.3225 Z"
    ),

    # Lingual: arco inferior
    "L": (
        "M 0.8490,0.8545 "
        "C 0.7573,0.9462 0.6304,0.9988 0.5007,0.9988 "
        "C 0.3710,0.9988 0.2441,0.9462 0.1524,0.8545 "
        "L 0.3301,0.6768 "
        "C 0.3750,0.7217 0.4372,0.7475 0.5007,0.7475 "
        "C 0.5643,0.7475 0.6264,0.7217 0.6713,0.6768 Z"
    ),

    # Distal: arco derecho
    "D": (
        "M 0.8555,0.1509 "
        "C 0.9473,0.2427 0.9998,0.3695 0.9998,0.4993 "
        "C 0.9998,0.6290 0.9473,0.7559 0.8555,0.8476 "
        "L 0.6778,0.6699 "
        "C 0.7228,0.6249 0.7485,0.5628 0.7485,0.4993 "
        "C 0.7485,0.4357 0.7228,0.3736 0.6778,0.3286 Z"
    ),

    # Mesial: arco izquierdo
    "M": (
        "M 0.1450,0.8476 "
        "C 0.0533,0.7559 0.0007,0.6290 0.0007,0.4993 "
        "C 0.0007,0.3695 0.0533,0.2427 0.1450,0.1509 "
        "L 0.3227,0.3286 "
        "C 0.2778,0.3736 0.2520,0.4357 0.2520,0.4993 "
        "C 0.2520,0.5628 0.2778,0.6249 0.3227,0.6699 Z"
    ),
}


def _scale_path(norm_path: str, x: float, y: float, w: float, h: float) -> str:
    """
    Escala un path normalizado (0..1) a coordenadas absolutas SVG.
    Soporta comandos M, C, L, Z con valores "nx,ny".
    """
    tokens = norm_path.split()
    result: list[str] = []
    i = 0
    while i < len(tokens):
        cmd = tokens[i]
        if cmd in ("M", "L"):
            i += 1
            nx, ny = tokens[i].split(",")
            result.append(f"{cmd} {x + float(nx)*w:.3f},{y + float(ny)*h:.3f}")
        elif cmd == "C":
            pts: list[str] = []
            for _ in range(3):
                i += 1
                nx, ny = tokens[i].split(",")
                pts.append(f"{x + float(nx)*w:.3f},{y + float(ny)*h:.3f}")
            result.append(f"C {' '.join(pts)}")
        elif cmd == "Z":
            result.append("Z")
        i += 1
    return " ".join(result)


def _outline(x: float, y: float) -> str:
    return _scale_path(_PATH_OUTLINE, x, y, TW, TH)


def _surface(name: str, x: float, y: float) -> str:
    p = _SURFACE_PATHS.get(name, "")
    return _scale_path(p, x, y, TW, TH) if p else ""


def _ancho_total() -> float:
    n = max(len(s) for s in FDIConstants.ARCADAS.values())
    return PAD_X * 2 + n * (TW + GAP_H)


# ─────────────────────────────────────────────────────────────────────────────
# Generador
# ─────────────────────────────────────────────────────────────────────────────

class OdontogramaSVGGenerator:

    @classmethod
    def generar_svg(cls, estados: list[dict], titulo: str = "ODONTOGRAMA") -> str:
        """
        Args:
            estados: lista de EstadoDienteService.estados_odontograma()
            titulo: texto de cabecera del gráfico
        """
        por_numero = {e["numero_diente"]: e for e in estados}

        total_w = _ancho_total()
        fila_h  = TH + BADGE_H + RANGE_H + 6
        filas_h = fila_h * len(FILAS) + ROW_GAP * (len(FILAS) - 1) + ARC_GAP
        legend_h = cls._alto_leyenda()
        total_h = PAD_Y + TITLE_H + filas_h + legend_h + PAD_Y
        cx = total_w / 2

        out: list[str] = []
        out.append(f'<rect width="{total_w}" height="{total_h}" fill="white"/>')
        out.append(cls._txt(cx, PAD_Y + 12, titulo, size=12, bold=True, anchor="middle"))

        y = PAD_Y + TITLE_H
        for i, (arcada, superior) in enumerate(FILAS):
            secuencia = FDIConstants.ARCADAS[arcada]
            x0 = cx - len(secuencia) * (TW + GAP_H) / 2 + GAP_H / 2
            for j, numero in enumerate(secuencia):
                estado = por_numero.get(numero) or {"numero_diente": numero}
                out.extend(cls._diente(estado, x0 + j * (TW + GAP_H), y, superior))
            y += fila_h + ROW_GAP
            if i == 1:
                # Separación entre maxilar y mandíbula
                out.append(
                    f'<line x1="{PAD_X}" y1="{y - ROW_GAP / 2 + ARC_GAP / 2:.1f}" '
                    f'x2="{total_w - PAD_X}" y2="{y - ROW_GAP / 2 + ARC_GAP / 2:.1f}" '
                    f'stroke="{C_BORDE}" stroke-width="1" stroke-dasharray="4,3"/>'
                )
                y += ARC_GAP

        out.extend(cls._leyenda(total_w, y))

        inner = "\n".join(out)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{total_w}" height="{total_h}" '
            f'viewBox="0 0 {total_w} {total_h}" '
            f'font-family="Helvetica,Arial,sans-serif">'
            f"{inner}</svg>"
        )

    @staticmethod
    def svg_a_png(svg_str: str, escala: float = 2) -> bytes:
        """
        Rasteriza el SVG a PNG con fondo blanco. `escala` multiplica el
        tamaño nominal del gráfico (escala 2 -> el doble de píxeles).
        """
        from svglib.svglib import svg2rlg
        from reportlab.graphics import renderPM

        drawing = svg2rlg(io.BytesIO(svg_str.encode("utf-8")))
        if drawing is None:
            raise ValueError("svg2rlg devolvió None")
        return renderPM.drawToString(
            drawing, fmt="PNG", dpi=72 * escala, bg=0xFFFFFF, backend=RENDERPM_BACKEND
        )

    # ── Diente individual ──────────────────────────────────────────────────

    @classmethod
    def _diente(cls, estado: dict, x: float, y_row: float, is_upper: bool) -> list[str]:
        out: list[str] = []
        cx = x + TW / 2
        fdi = str(estado["numero_diente"])

        if is_upper:
            # Superior: número -> corona -> barra de rango
            y_badge = y_row
            y_crown = y_row + BADGE_H + 2
            y_range = y_crown + TH + 2
        else:
            # Inferior: barra de rango -> corona -> número
            y_range = y_row
            y_crown = y_row + RANGE_H + 2
            y_badge = y_crown + TH + 2

        crown_outline = _outline(x, y_crown)
        color = estado.get("color_dominante") or SIN_COLOR

        # 1. Fondo blanco con la forma del diente
        out.append(f'<path d="{crown_outline}" fill="{C_CROWN_FILL}" stroke="none"/>')

        # 2. División de superficies
        for surf in ("V", "L", "D", "M", "O"):
            out.append(
                f'<path d="{_surface(surf, x, y_crown)}" fill="none" '
                f'stroke="{C_BORDE}" stroke-width="0.35"/>'
            )

        # 3. Relleno con el color dominante
        if color != SIN_COLOR:
            raw_sups = estado.get("superficies") or []
            sups = [_SURFACE_NORM[s] for s in raw_sups if s in _SURFACE_NORM]
            pieza_completa = not sups or len(sups) < len(raw_sups)

            if pieza_completa:
                out.append(
                    f'<path d="{crown_outline}" fill="{color}" fill-opacity="0.35" stroke="none"/>'
                )
                glifo = estado.get("glifo")
                if glifo:
                    out.append(cls._txt(
                        cx, y_crown + TH * 0.5, glifo,
                        size=16, bold=True, anchor="middle",
                        color=color, dominant="middle",
                    ))
            # Periféricas primero, oclusal encima
            for sup in sorted(set(sups), key=lambda s: s == "O"):
                out.append(
                    f'<path d="{_surface(sup, x, y_crown)}" '
                    f'fill="{color}" fill-opacity="0.72" '
                    f'stroke="{color}" stroke-width="0.6"/>'
                )

        # 4. Contorno exterior
        out.append(
            f'<path d="{crown_outline}" fill="none" '
            f'stroke="{C_CROWN_STROKE}" stroke-width="0.8"/>'
        )

        # 5. Contador de condiciones (esquina superior)
        multiplicidad = estado.get("multiplicidad")
        if multiplicidad:
            out.append(
                f'<circle cx="{x + TW - 4}" cy="{y_crown + 4}" r="6" '
                f'fill="{C_CONTADOR_BG}" stroke="white" stroke-width="0.8"/>'
            )
            out.append(cls._txt(
                x + TW - 4, y_crown + 4.5, str(multiplicidad),
                size=7, bold=True, anchor="middle",
                color=C_CONTADOR_FG, dominant="middle",
            ))

        # 6. Punto de estado (esquina inferior)
        color_estado = estado.get("color_estado")
        if color_estado:
            out.append(
                f'<circle cx="{x + TW - 4}" cy="{y_crown + TH - 4}" r="3.5" '
                f'fill="{color_estado}" stroke="white" stroke-width="0.6"/>'
            )

        # 7. Barra de rango (se une con la celda vecina)
        rango = estado.get("rango")
        if rango:
            entrada = CATALOGO_CONDICIONES.get(rango["tipo"])
            color_rango = entrada["color"] if entrada else C_GRIS
            ancho = TW + (GAP_H if rango["posicion"] in ("inicio", "medio") else 0)
            out.append(
                f'<rect x="{x}" y="{y_range}" width="{ancho}" height="{RANGE_H}" '
                f'fill="{color_rango}"/>'
            )

        # 8. Número FDI
        out.append(
            f'<rect x="{x+1}" y="{y_badge}" '
            f'width="{TW-2}" height="{BADGE_H-2}" '
            f'rx="2" fill="{C_BADGE_BG}" stroke="{C_BORDE}" stroke-width="0.5"/>'
        )
        out.append(cls._txt(
            cx, y_badge + BADGE_H / 2, fdi,
            size=8, bold=True, anchor="middle",
            color=C_BADGE_FG, dominant="middle",
        ))

        return out

    # ── Leyenda ────────────────────────────────────────────────────────────

    @staticmethod
    def _alto_leyenda() -> float:
        filas_cond = -(-len(TipoCondicion.choices) // LEGEND_COLS)
        return LEGEND_ROW_H * (filas_cond + 3) + 10

    @classmethod
    def _leyenda(cls, total_w: float, y_start: float) -> list[str]:
        out: list[str] = []
        col_w = (total_w - PAD_X * 2) / LEGEND_COLS
        y = y_start + 10

        for i, (valor, etiqueta) in enumerate(TipoCondicion.choices):
            col, fila = i % LEGEND_COLS, i // LEGEND_COLS
            lx = PAD_X + col * col_w
            ly = y + fila * LEGEND_ROW_H
            out.append(
                f'<rect x="{lx}" y="{ly}" width="10" height="10" rx="2" '
                f'fill="{CATALOGO_CONDICIONES[valor]["color"]}"/>'
            )
            out.append(cls._txt(lx + 14, ly + 8.5, etiqueta, size=8, color=C_NEGRO))
        y += LEGEND_ROW_H * -(-len(TipoCondicion.choices) // LEGEND_COLS)

        for i, (valor, etiqueta) in enumerate(EstadoTratamiento.choices):
            lx = PAD_X + i * col_w
            out.append(f'<circle cx="{lx + 5}" cy="{y + 5}" r="3.5" fill="{COLOR_ESTADO[valor]}"/>')
            out.append(cls._txt(lx + 14, y + 8.5, etiqueta, size=8, color=C_NEGRO))
        y += LEGEND_ROW_H

        out.append(cls._txt(
            PAD_X, y + 8.5,
            "Múltiples condiciones: Número en esquina superior  ·  "
            "Estado del tratamiento: Punto en esquina inferior",
            size=7.5, color=C_GRIS,
        ))
        return out

    # ── Helper texto ───────────────────────────────────────────────────────

    @staticmethod
    def _txt(
        x: float, y: float, label: str,
        size: float = 10,
        bold: bool = False,
        anchor: str = "start",
        color: str = C_NEGRO,
        dominant: str = "auto",
    ) -> str:
        fw   = "bold" if bold else "normal"
        safe = label.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        return (
            f'<text x="{x:.1f}" y="{y:.1f}" '
            f'text-anchor="{anchor}" dominant-baseline="{dominant}" '
            f'font-size="{size}" font-weight="{fw}" fill="{color}">'
            f"{safe}</text>"
        )
