"""
Ledger wire schema.

Protobuf message classes for the ledger's transaction and batch messages.
Field names and numbers mirror the ledger's ``transaction.proto`` and
``batch.proto`` exactly; changing either invalidates every signature the
ledger has ever accepted.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_FieldProto = descriptor_pb2.FieldDescriptorProto

_STRING = _FieldProto.TYPE_STRING
_BYTES = _FieldProto.TYPE_BYTES
_BOOL = _FieldProto.TYPE_BOOL
_MESSAGE = _FieldProto.TYPE_MESSAGE

_PACKAGE = "gitchain.ledger"

# message name -> [(field name, number, type, repeated, message type)]
_MESSAGES = {
    "TransactionHeader": [
        ("batcher_public_key", 1, _STRING, False, None),
        ("dependencies", 2, _STRING, True, None),
        ("family_name", 3, _STRING, False, None),
        ("family_version", 4, _STRING, False, None),
        ("inputs", 5, _STRING, True, None),
        ("nonce", 6, _STRING, False, None),
        ("outputs", 7, _STRING, True, None),
        ("payload_sha512", 9, _STRING, False, None),
        ("signer_public_key", 10, _STRING, False, None),
    ],
    "Transaction": [
        ("header", 1, _BYTES, False, None),
        ("header_signature", 2, _STRING, False, None),
        ("payload", 3, _BYTES, False, None),
    ],
    "BatchHeader": [
        ("signer_public_key", 1, _STRING, False, None),
        ("transaction_ids", 2, _STRING, True, None),
    ],
    "Batch": [
        ("header", 1, _BYTES, False, None),
        ("header_signature", 2, _STRING, False, None),
        ("transactions", 3, _MESSAGE, True, "Transaction"),
        ("trace", 4, _BOOL, False, None),
    ],
    "BatchList": [
        ("batches", 1, _MESSAGE, True, "Batch"),
    ],
}


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="gitchain/ledger.proto",
        package=_PACKAGE,
        syntax="proto3",
    )
    for message_name, fields in _MESSAGES.items():
        message_proto = file_proto.message_type.add(name=message_name)
        for name, number, field_type, repeated, type_name in fields:
            field_proto = message_proto.field.add(
                name=name,
                number=number,
                type=field_type,
                label=_FieldProto.LABEL_REPEATED if repeated else _FieldProto.LABEL_OPTIONAL,
            )
            if type_name:
                field_proto.type_name = f".{_PACKAGE}.{type_name}"
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(
        _pool.FindMessageTypeByName(f"{_PACKAGE}.{name}")
    )


TransactionHeader = _message_class("TransactionHeader")
Transaction = _message_class("Transaction")
BatchHeader = _message_class("BatchHeader")
Batch = _message_class("Batch")
BatchList = _message_class("BatchList")


def serialize(message) -> bytes:
    """Serialize a message with deterministic field and map ordering."""
    return message.SerializeToString(deterministic=True)
