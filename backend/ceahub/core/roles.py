# backend/ceahub/core/roles.py

import enum

class AgentRole(str, enum.Enum):
    CONSULTANT = "consultant"   # default for every registration
    ADMIN = "admin"             # can review sales/payouts and edit agents
