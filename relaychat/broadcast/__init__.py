# Broadcast package: orchestration and fan-out

from relaychat.broadcast.audience import Audience, Outbound, room_channel
from relaychat.broadcast.coordinator import ChatCoordinator
from relaychat.broadcast.publisher import SocketIOPublisher

__all__ = ['Audience', 'Outbound', 'room_channel', 'ChatCoordinator', 'SocketIOPublisher']
