"""
Report and breakdown labels. Portuguese is the reference language — missing
keys fall back to it, then to the key itself.
"""

SUPPORTED_LANGUAGES = ("pt", "en")

TRANSLATIONS = {
    "pt": {
        "slab": "Laje (Betão Armado)",
        "box": "Viga / Pilar / Caixa",
        "slab_mesh": "Malha de Laje",
        "beam_pillar": "Viga / Pilar",
        "mesh": "Malha (Inf/Sup)",
        "dist": "Distribuição / Cavaletes",
        "long": "Longitudinal (Varões)",
        "stirrups": "Estribos (Cinta)",
        "cement": "Cimento Portland",
        "sand": "Areia (Média/Lavada)",
        "gravel": "Brita / Inertes",
        "water": "Água",
        "steel": "Aço Total (Armadura)",
        "bags": "sacos",
        "report_title": "Relatório de Materiais",
        "report_subtitle": "Calculadora Civil",
        "section_summary": "1. Resumo do Projeto",
        "section_materials": "2. Quantidades de Materiais",
        "section_steel": "3. Detalhe de Armadura",
        "structure_type": "Tipo de Estrutura",
        "total_volume": "Volume Total Estimado",
        "footprint_area": "Área",
        "mix": "Traço Configurado (Referência 1m³)",
        "project": "Projeto",
        "material": "Material",
        "quantity": "Quantidade Estimada",
        "notes": "Observações",
        "estimated_cost": "Custo Estimado",
        "disclaimer": (
            "Aviso Legal: Este documento é uma estimativa gerada automaticamente com base em "
            "rácios volumétricos médios. Não substitui um projeto de estabilidade nem o cálculo "
            "estrutural rigoroso efetuado por um engenheiro civil."
        ),
        "generated_by": "Gerado por",
    },
    "en": {
        "slab": "Slab (Reinforced Concrete)",
        "box": "Beam / Pillar / Box",
        "slab_mesh": "Slab Mesh",
        "beam_pillar": "Beam / Pillar",
        "mesh": "Mesh (Bottom/Top)",
        "dist": "Distribution / Chairs",
        "long": "Longitudinal (Bars)",
        "stirrups": "Stirrups (Ties)",
        "cement": "Portland Cement",
        "sand": "Sand (Medium/Washed)",
        "gravel": "Gravel / Aggregate",
        "water": "Water",
        "steel": "Total Steel (Rebar)",
        "bags": "bags",
        "report_title": "Materials Report",
        "report_subtitle": "Civil Calculator",
        "section_summary": "1. Project Summary",
        "section_materials": "2. Material Quantities",
        "section_steel": "3. Reinforcement Detail",
        "structure_type": "Structure Type",
        "total_volume": "Estimated Total Volume",
        "footprint_area": "Area",
        "mix": "Configured Mix (per 1m³)",
        "project": "Project",
        "material": "Material",
        "quantity": "Estimated Quantity",
        "notes": "Notes",
        "estimated_cost": "Estimated Cost",
        "disclaimer": (
            "Disclaimer: This document is an automatically generated estimate based on average "
            "volumetric ratios. It does not replace a structural design or the rigorous "
            "calculations of a civil engineer."
        ),
        "generated_by": "Generated by",
    },
}


def t(key: str, lang: str = "pt") -> str:
    return TRANSLATIONS.get(lang, {}).get(key) or TRANSLATIONS["pt"].get(key) or key
