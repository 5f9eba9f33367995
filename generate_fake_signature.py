import os
import sys
import json

from paybridge.signer import sign_attached

# MUST MATCH LGPAY_SECRET_KEY of the running server
KEY_SECRET = os.getenv("LGPAY_SECRET_KEY", "5678")

# 1. Pass the order_sn you got from 'create-order' as the first argument
ORDER_SN = sys.argv[1] if len(sys.argv) > 1 else "p1700000000000"

# 2. Amount in minor units (paisa)
MONEY = sys.argv[2] if len(sys.argv) > 2 else "100"

notification = {
    "order_sn": ORDER_SN,
    "money": MONEY,
    "status": "1",
}

# 3. Generate the Signature
signed = sign_attached(notification, KEY_SECRET)

print("--- POST THIS TO /api/webhook ---")
print(json.dumps(signed, indent=2))
