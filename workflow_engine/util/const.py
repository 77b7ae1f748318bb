HANDLE_DEFAULT = 'default'

# Event names delivered to listeners
EVENT_NODE_EXECUTED = 'nodeExecuted'
EVENT_EXECUTION_COMPLETE = 'executionComplete'
EVENT_EXECUTION_ERROR = 'executionError'

# Unknown node type policies
POLICY_FALLBACK = 'fallback'
POLICY_ERROR = 'error'

# Fan-in handle collision policies
POLICY_LAST_WINS = 'last_wins'

# Legacy editor type names mapped onto the registered type tags
NODE_TYPE_ALIASES = {
    'api': 'external-call',
    'database': 'data-store',
    'default': 'process',
}
