from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PHONE_MESSAGE = "অনুগ্রহ করে একটি সঠিক বাংলাদেশি মোবাইল নাম্বার দিন (যেমন: 01712345678)"
DEFAULT_VPN_MESSAGE = "দুঃখিত, VPN/Proxy ব্যবহার করে অর্ডার করা যাবে না। অনুগ্রহ করে আপনার সাধারণ ইন্টারনেট সংযোগ ব্যবহার করুন।"
DEFAULT_BLOCKED_PHONE_MESSAGE = "দুঃখিত, এই ফোন নাম্বার থেকে অর্ডার গ্রহণ করা সম্ভব হচ্ছে না। সাহায্যের জন্য যোগাযোগ করুন।"
DEFAULT_BLOCKED_IP_MESSAGE = "দুঃখিত, আপনার নেটওয়ার্ক থেকে অর্ডার গ্রহণ করা সম্ভব হচ্ছে না। সাহায্যের জন্য যোগাযোগ করুন।"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./guardify.db"
    REDIS_URL: str = "redis://localhost:6379/0"
    INTERNAL_SHARED_SECRET: str = "change-me"

    BD_PHONE_VALIDATION_ENABLED: bool = True
    BD_PHONE_VALIDATION_MESSAGE: str = DEFAULT_PHONE_MESSAGE

    VPN_BLOCK_ENABLED: bool = True
    VPN_BLOCK_MESSAGE: str = DEFAULT_VPN_MESSAGE

    # newline separated, CIDR allowed for IPs
    WHITELIST_ENABLED: bool = False
    WHITELISTED_IPS: str = ""
    WHITELISTED_PHONES: str = ""

    # newline separated, exact IPs; phones match across 01 / 880 / +880 forms
    BLOCKED_PHONES: str = ""
    BLOCKED_IPS: str = ""
    BLOCKED_PHONE_MESSAGE: str = DEFAULT_BLOCKED_PHONE_MESSAGE
    BLOCKED_IP_MESSAGE: str = DEFAULT_BLOCKED_IP_MESSAGE

    DISCORD_WEBHOOK_URL: str | None = None
    DISCORD_BOT_NAME: str = "Guardify"
    ENV: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
