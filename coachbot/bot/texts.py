# fixed bot texts (Bahasa Indonesia)

NOT_REGISTERED = "👋 Kamu belum terdaftar. Hubungi owner untuk akses."
ACCESS_EXPIRED = "⛔ Aksesmu telah kadaluarsa. Hubungi owner untuk perpanjangan."
ACCESS_INACTIVE = "⛔ Aksesmu tidak aktif. Hubungi owner untuk mengaktifkan."
QUOTA_EXHAUSTED = "⚠️ Kuotamu habis. Hubungi owner untuk top-up."

REVOKED_NOTICE = "⛔ Masa aktif Anda telah habis. Hubungi owner untuk perpanjangan layanan."
EXPIRY_REMINDER = (
    "🔔 Pemberitahuan: Masa aktif Anda akan berakhir dalam {days} hari. "
    "Hubungi owner untuk perpanjangan."
)

UNKNOWN_COMMAND = "❌ Command tidak dikenali. Ketik /help untuk bantuan."

ADD_USAGE = "❌ Format: /add [nomor] [hari] [kuota?]"
CEK_USAGE = "❌ Format: /cek [nomor]"
USER_NOT_FOUND = "❌ User tidak ditemukan."

ADMIN_HELP = (
    "🤖 Owner Commands:\n"
    "/add [nomor] [hari] [kuota] - Tambah user\n"
    "/cek [nomor] - Cek status user\n"
    "/list - List semua user\n"
    "/help - Tampilkan bantuan"
)

USER_HELP = (
    "🤖 AI Coaching Bot\n\n"
    "Kirim pesan untuk berbicara dengan AI coach!\n\n"
    "Commands:\n"
    "/status - Cek status akun\n"
    "/help - Tampilkan bantuan"
)

USER_NOT_REGISTERED = "❌ Anda belum terdaftar. Hubungi owner untuk akses."
USER_INACTIVE = "⛔ Akses Anda tidak aktif. Hubungi owner untuk perpanjangan."

FALLBACK_REPLIES = (
    "Maaf, saya sedang mengalami gangguan teknis. Bisakah Anda mengulangi pertanyaannya?",
    "Sistem saya sedang sibuk. Silakan coba lagi dalam beberapa saat.",
    "Saya sedang tidak bisa mengakses pengetahuan saya. Mohon coba sebentar lagi.",
)


def unlimited_or(value) -> str:
    return "Unlimited" if value is None else str(value)


def user_added(identity: str, days: int, quota) -> str:
    return (
        f"✅ User {identity} ditambahkan.\n"
        f"Masa aktif: {days} hari.\n"
        f"Quota: {unlimited_or(quota)}"
    )


def user_report(identity: str, status: str, quota, usage_count: int) -> str:
    return (
        f"📊 User {identity}\n"
        f"Status: {status}\n"
        f"Kuota: {unlimited_or(quota)}\n"
        f"Digunakan: {usage_count}x"
    )


def user_list(active: int, expired: int) -> str:
    return (
        "📋 Daftar User:\n"
        f"Aktif: {active} user\n"
        f"Kadaluarsa: {expired} user"
    )


def account_status(days: int, quota, usage_count: int) -> str:
    quota_text = "unlimited" if quota is None else f"{quota} pesan tersisa"
    return (
        "✅ Status Akun:\n"
        f"Masa aktif: {days} hari tersisa\n"
        f"Kuota: {quota_text}\n"
        f"Total penggunaan: {usage_count}x"
    )
