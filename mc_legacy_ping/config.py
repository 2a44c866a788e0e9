# --- Default options ---
DEFAULT_PORT = 25565
DEFAULT_PROTOCOL_VERSION = 47  # 1.8 协议号，旧版 ping 不使用，仅为接口对齐
DEFAULT_TIMEOUT = 1000 * 5  # 毫秒
DEFAULT_ENABLE_SRV = True

# --- SRV ---
SRV_SERVICE_PREFIX = "_minecraft._tcp."

# --- Legacy Server List Ping (Beta 1.8 - 1.3.2) ---
# https://wiki.vg/Server_List_Ping#Beta_1.8_to_1.3
LEGACY_PING_PACKET_ID = 0xFE
KICK_PACKET_ID = 0xFF
SECTION_SIGN = "§"
PAYLOAD_ENCODING = "utf-16-be"

# 玩家数按 int32 处理
MAX_PLAYER_COUNT = 2 ** 31 - 1

# --- Logging ---
LOG_FORMAT = '%(asctime)s] %(levelname)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
