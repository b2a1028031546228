"""
solowindow.rules.rect - Estructura geometrica Rect y prueba de solape.

Define un rectangulo inmutable alineado a los ejes que representa el
area que ocupa una ventana en coordenadas de pantalla. Es la unica
geometria que necesitan las reglas de minimizado.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Rectangulo inmutable definido por sus bordes (left, top, right, bottom).

    Todas las coordenadas estan en pixeles de pantalla. Los bordes son
    monotonos: left <= right y top <= bottom.

    Atributos:
        left:   Borde izquierdo.
        top:    Borde superior.
        right:  Borde derecho.
        bottom: Borde inferior.
    """

    left: int
    top: int
    right: int
    bottom: int

    def __post_init__(self) -> None:
        if self.right < self.left or self.bottom < self.top:
            raise ValueError(
                f"Rect con bordes invertidos: "
                f"({self.left}, {self.top}, {self.right}, {self.bottom})"
            )

    # ------------------------------------------------------------------
    # Propiedades derivadas
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    # ------------------------------------------------------------------
    # Operaciones geometricas
    # ------------------------------------------------------------------
    def overlaps(self, other: Rect) -> bool:
        """
        True si este rectangulo se solapa con *other*.

        Dos rectangulos NO se solapan solo si uno queda estrictamente a la
        izquierda, derecha, arriba o abajo del otro. Bordes que se tocan
        (self.right == other.left) cuentan como solape.
        """
        if self.right < other.left or self.left > other.right:
            return False
        if self.bottom < other.top or self.top > other.bottom:
            return False
        return True

    # ------------------------------------------------------------------
    # Representacion
    # ------------------------------------------------------------------
    def __str__(self) -> str:
        return f"Rect({self.width}x{self.height}+{self.left}+{self.top})"


def overlaps(a: Rect, b: Rect) -> bool:
    """Atajo funcional de Rect.overlaps: True si *a* y *b* se solapan."""
    return a.overlaps(b)
