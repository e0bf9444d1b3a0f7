import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Config:
    DEBUG = os.getenv("FLASK_DEBUG", "1") == "1"
    TESTING = False
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL", "sqlite:///" + os.path.join(BASE_DIR, "facturation.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "change_me")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # PDF branding
    BRAND_COLOR = os.getenv("BRAND_COLOR", "#2980B9")
    LOGO_PATH = os.getenv("LOGO_PATH", os.path.join(BASE_DIR, "addons", "logo.png"))
    THANK_YOU_TEXT = os.getenv("THANK_YOU_TEXT", "Merci pour votre confiance !")

    # Money display
    CURRENCY_CODE = os.getenv("CURRENCY_CODE", "DZD")
    AMOUNT_WORDS_LANG = os.getenv("AMOUNT_WORDS_LANG", "fr")
    CURRENCY_UNIT = os.getenv("CURRENCY_UNIT", "dinars algériens")
    CURRENCY_CENTS_UNIT = os.getenv("CURRENCY_CENTS_UNIT", "centimes")
    AMOUNT_WORDS_CONJUNCTION = os.getenv("AMOUNT_WORDS_CONJUNCTION", "et")
    AMOUNT_WORDS_MINUS = os.getenv("AMOUNT_WORDS_MINUS", "moins")
    AMOUNT_WORDS_ZERO = os.getenv("AMOUNT_WORDS_ZERO", "Zéro dinar algérien")


class TestConfig(Config):
    DEBUG = False
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOGO_PATH = None
