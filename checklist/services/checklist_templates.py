# checklist/services/checklist_templates.py
from __future__ import annotations

import enum

from checklist.domain.inspection import InspectionItem, InspectionQuestion


class EquipmentType(str, enum.Enum):
    """Haul truck (CAEX) models with a checklist template."""

    CAEX_797F = "CAEX_797F"
    CAEX_798AC = "CAEX_798AC"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    EquipmentType.CAEX_797F: "CAEX 797F",
    EquipmentType.CAEX_798AC: "CAEX 798AC",
}


# (item name, [question text, ...]) in checklist order
TEMPLATES: dict[EquipmentType, list[tuple[str, list[str]]]] = {
    EquipmentType.CAEX_797F: [
        (
            "Condiciones Generales",
            [
                "Extintores contra incendio habilitados en plataforma cabina operador y con inspección al día",
                "Pulsador parada de emergencia en buen estado",
                "Verificar desgaste excesivo y falta de pernos del aro",
                "Inspección visual y al día del sistema AFEX / ANSUR",
                "Pasadores de tolva",
                "Fugas sistemas hidráulicos puntos calientes (Motor)",
                "Números de identificación caex instalados (frontal, trasero)",
                "Estanque de combustible sin fugas",
                "Estanque de aceite hidráulico sin fugas",
                "Sistema engrase llega a todos los puntos",
            ],
        ),
        (
            "Cabina Operador",
            [
                "Panel de alarmas en buen estado",
                "Asiento operador y de copiloto en buen estado (chequear cinturón de seguridad en ambos "
                "asientos, apoya brazos, riel de desplazamiento, pulmón de aire)",
                "Espejos en buen estado, sin rayaduras",
                "Revisar bitácora del equipo (dejar registro)",
                "Radio musical y parlantes en buen estado",
                "Testigo indicador viraje funcionando (intermitente)",
                "Funcionamiento bocina",
                "Funcionamiento limpia parabrisas",
                "Funcionamiento alza vidrios",
                "Funcionamiento de A/C",
                "Parasol en buen estado",
            ],
        ),
        (
            "Sistema de Dirección",
            [
                "Barra de dirección en buen estado",
                "Fugas de aceite por bombas/cañerías / mangueras / conectores",
                "Cilindros de dirección sin fugas de aceite / sin daños",
            ],
        ),
        (
            "Sistema de frenos",
            [
                "Fugas de aceite por cañerías / mangueras / conectores",
                "Gabinete hidráulico sin fugas de aceite",
            ],
        ),
        (
            "Motor Diesel",
            [
                "Fugas de aceite por cañerías / mangueras / conectores",
                "Fugas de combustibles por cañerías / mangueras / turbos / carter",
                "Fugas de refrigerante",
                "Mangueras con roce y/o sueltas",
                "Cables eléctricos sin roce y ruteados bajo estándar",
                "Boquillas sistema AFEX bien direccionadas",
            ],
        ),
        (
            "Suspensiones delanteras",
            [
                "Estado de sello protector vástago (altura susp.)",
                "Fugas de aceite o grasa",
            ],
        ),
        (
            "Suspensiones traseras",
            [
                "Suspensión izquierda con pasador desplazado",
                "Suspensión derecha con pasador desplazado",
                "Articulaciones lubricadas",
            ],
        ),
        (
            "Sistema estructural",
            [
                "Baranda o cadena acceso a escalas emergencia",
                "Barandas plataforma cabina operador",
                "Barandas escalera de acceso",
                "Escalera de acceso flotante",
            ],
        ),
    ],
    # TODO: replace with the 798AC checklist once maintenance publishes it
    EquipmentType.CAEX_798AC: [
        (
            "Sistema Eléctrico 798AC",
            [
                "Panel de control principal en buen estado",
                "Conexiones eléctricas sin daños visibles",
                "Sistema de iluminación funciona correctamente",
                "Baterías y conexiones en buen estado",
            ],
        ),
        (
            "Sistema Hidráulico 798AC",
            [
                "Mangueras hidráulicas sin fugas",
                "Nivel de aceite hidráulico correcto",
                "Bombas hidráulicas sin ruidos anormales",
                "Filtros hidráulicos limpios y en buen estado",
            ],
        ),
        (
            "Sistema de Propulsión 798AC",
            [
                "Motor principal en buen estado",
                "Sistema de transmisión sin ruidos anormales",
                "Convertidor de par funciona correctamente",
                "Frenos de servicio operativos",
            ],
        ),
        (
            "Sistema de Frenos 798AC",
            [
                "Frenos en buen estado",
                "Sistema antibloqueo funcional",
                "Sin fugas en el sistema de frenos",
            ],
        ),
        (
            "Sistema de Suspensión 798AC",
            [
                "Suspensiones en buen estado",
                "Sin fugas de aceite en amortiguadores",
                "Sin ruidos anormales al operar",
            ],
        ),
        (
            "Sistema de Control 798AC",
            [
                "Dispositivos de control funcionando correctamente",
                "Pantallas operativas sin errores",
                "Sensores calibrados y operativos",
            ],
        ),
        (
            "Equipo de Seguridad 798AC",
            [
                "Extintores en buen estado y vigentes",
                "Sistema de parada de emergencia funcionando",
                "Alarmas y bocinas operativas",
            ],
        ),
        (
            "Estructura General 798AC",
            [
                "Sin daños visibles en estructura",
                "Sin fisuras en componentes críticos",
                "Barandas de seguridad intactas",
            ],
        ),
    ],
}


def build_checklist_items(equipment_type: EquipmentType) -> tuple[InspectionItem, ...]:
    """Fresh items/questions (new ids on every call) for one equipment type."""
    return tuple(
        InspectionItem(
            name=name,
            questions=tuple(InspectionQuestion(text=text) for text in questions),
        )
        for name, questions in TEMPLATES[equipment_type]
    )


def format_equipment(equipment_type: EquipmentType, equipment_number: str) -> str:
    """'CAEX 797F 301'; empty while no number is entered."""
    number = equipment_number.strip()
    if not number:
        return ""
    return f"{equipment_type.display_name} {number}"
