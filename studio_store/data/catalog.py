# studio_store/data/catalog.py
"""Catalogo inicial del estudio (un servicio por categoria)."""
from decimal import Decimal

from studio_store.domain.schemas import Service, ServiceCategory

INITIAL_SERVICES = [
    Service(
        id="1",
        name="Ilustración Digital Full Color",
        category=ServiceCategory.ILUSTRACION_DIGITAL,
        description="Ilustración detallada de alta resolución ideal para portadas, posters o publicidad.",
        price=Decimal("250"),
        unit="proyecto",
        delivery_time="5-7 días",
        image="https://picsum.photos/seed/art1/800/600",
        variations=["Retrato", "Paisaje", "Concept Art"],
    ),
    Service(
        id="2",
        name="Animación Explainer 2D",
        category=ServiceCategory.ANIMACION_2D,
        description="Video explicativo en motion graphics para empresas y startups.",
        price=Decimal("150"),
        unit="minuto",
        delivery_time="10-15 días",
        image="https://picsum.photos/seed/anim2/800/600",
        variations=["Vectorial", "Cut-out"],
    ),
    Service(
        id="3",
        name="Modelado y Render 3D",
        category=ServiceCategory.ANIMACION_3D,
        description="Creación de assets 3D de alta fidelidad con texturas PBR.",
        price=Decimal("400"),
        unit="asset",
        delivery_time="7-10 días",
        image="https://picsum.photos/seed/3dmodel/800/600",
        variations=["Low Poly", "High Poly", "Fotorealista"],
    ),
    Service(
        id="4",
        name="Diseño de Personajes",
        category=ServiceCategory.CHARACTER_DESIGN,
        description="Hoja de personaje completa con vistas frontal, lateral y expresiones.",
        price=Decimal("300"),
        unit="personaje",
        delivery_time="5 días",
        image="https://picsum.photos/seed/char/800/600",
        variations=["Cartoon", "Anime", "Semi-realista"],
    ),
    Service(
        id="5",
        name="Logo Animation",
        category=ServiceCategory.MOTION_GRAPHICS,
        description="Animación de logotipo para intros de video y redes sociales.",
        price=Decimal("120"),
        unit="proyecto",
        delivery_time="3 días",
        image="https://picsum.photos/seed/motion/800/600",
        variations=["Glitch", "Clean", "Liquid"],
    ),
    Service(
        id="6",
        name="Storyboard Profesional",
        category=ServiceCategory.STORYBOARDS,
        description="Visualización secuencial para cine, tv o publicidad.",
        price=Decimal("50"),
        unit="frame",
        delivery_time="2-4 días",
        image="https://picsum.photos/seed/story/800/600",
        variations=["Boceto", "Clean Line", "Tono"],
    ),
]

#estilos ofrecidos en la solicitud personalizada
CUSTOM_STYLES = [
    "Animación 2D Vectorial",
    "Animación Tradicional (Frame-by-frame)",
    "3D Realista",
    "3D Low Poly",
    "Motion Graphics Corporativo",
    "Stop Motion Digital",
]
