"""
Key-based lookup of localized strings.

Keys use a dotted namespace ("header.locationFinder"). A value is either a
string or an ordered list of strings. Unknown keys resolve to the key
itself so a missing translation is visible rather than fatal.
"""

from common.config import DEFAULT_LOCALE

# Bundled English table. Full translations are supplied by the host app.
DEFAULT_STRINGS: dict[str, str | list[str]] = {
    "hero.cosmeticServices": [
        "Skin Analysis",
        "Botox & Fillers",
        "Laser Hair Removal",
        "Chemical Peels",
        "Hydrafacial",
    ],
    "hero.fitnessServices": [
        "Body Composition Scan",
        "Personal Training",
        "Nutrition Planning",
        "Posture Assessment",
    ],
    "ourExperts.coaches": ["Sara Haddad", "Omar Khalil"],
    "ourExperts.doctors": ["Dr. Lina Mansour", "Dr. Karim Aziz"],
    "header.skinConsultation": "Skin Consultation",
    "header.fitnessAssessment": "Fitness Assessment",
    "header.locationFinder": "Find a Provider",
    "header.aiCoach": "AI Coach",
    "header.marketTrends": "Market Trends",
    "header.ourExperts": "Our Experts",
    "header.collaboration": "Collaboration",
    "header.joinUs": "Join Us",
    "header.myPlans": "My Plans",
    "header.downloadApp": "Download App",
    "assessment.skinSubtitle": "Get a personalized skincare plan from a photo and a few questions.",
    "assessment.fitnessSubtitle": "Get a training and nutrition plan tailored to your body and goals.",
    "locationFinder.subtitle": "Find clinics, doctors, gyms and coaches near you.",
    "aiCoach.subtitle": "Chat with AURA AI about beauty, wellness and fitness.",
    "marketTrends.subtitle": "The latest trends in the beauty and wellness market.",
    "ourExperts.subtitle": "Meet the doctors and coaches behind AURA AI.",
    "collaborationPage.goalText": "Partner with AURA AI to reach clients looking for trusted care.",
    "joinUsPage.subtitle": "Help us build the future of personal wellness.",
    "joinUsPage.applySuccess": "Thank you! Your application has been received.",
    "myPlansPage.subtitle": "Review and restore the plans you have saved.",
    "downloadAppPage.subtitle": "Take AURA AI with you on iOS and Android.",
    "validation.required": "This field is required.",
}


class Localizer:
    """Resolves dotted keys against the table for one locale."""

    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        strings: dict[str, str | list[str]] | None = None,
    ):
        self.locale = locale
        self.strings = DEFAULT_STRINGS if strings is None else strings

    def t(self, key: str) -> str | list[str]:
        value = self.strings.get(key, key)
        if isinstance(value, list):
            return list(value)
        return value

    def text(self, key: str) -> str:
        value = self.t(key)
        return ", ".join(value) if isinstance(value, list) else value

    def items(self, key: str) -> list[str]:
        """Like t() for list-valued keys; an unknown key yields no items."""
        if key not in self.strings:
            return []
        value = self.t(key)
        return value if isinstance(value, list) else [value]
