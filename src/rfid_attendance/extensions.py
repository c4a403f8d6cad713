from flask_socketio import SocketIO

# Threading mode: scans are pushed from the serial reader thread.
socketio = SocketIO(async_mode="threading")
