"""Wire codec for assert location requests."""
from typing import Any, Dict

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError as ProtobufDecodeError

from .errors import DecodeError

MESSAGE_NAME = "gateway_assert_loc_v1_pb"

# Mirrors gateway_gatt_char_assert_loc.proto, field numbers follow list order
_FIELDS = [
    ("lat", descriptor_pb2.FieldDescriptorProto.TYPE_DOUBLE),
    ("lon", descriptor_pb2.FieldDescriptorProto.TYPE_DOUBLE),
    ("owner", descriptor_pb2.FieldDescriptorProto.TYPE_STRING),
    ("nonce", descriptor_pb2.FieldDescriptorProto.TYPE_UINT64),
    ("fee", descriptor_pb2.FieldDescriptorProto.TYPE_UINT64),
    ("amount", descriptor_pb2.FieldDescriptorProto.TYPE_UINT64),
    ("payer", descriptor_pb2.FieldDescriptorProto.TYPE_STRING),
]


def _build_message_class():
    """Build the protobuf message class from the field table."""
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="gateway_gatt_char_assert_loc.proto",
        syntax="proto3",
    )
    message_proto = file_proto.message_type.add(name=MESSAGE_NAME)
    for number, (name, field_type) in enumerate(_FIELDS, start=1):
        message_proto.field.add(
            name=name,
            number=number,
            type=field_type,
            label=descriptor_pb2.FieldDescriptorProto.LABEL_OPTIONAL,
        )

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return message_factory.GetMessageClass(pool.FindMessageTypeByName(MESSAGE_NAME))


AssertLocV1 = _build_message_class()


class AssertLocationRequest:
    """A decoded request to build an assert location transaction."""

    def __init__(
        self,
        lat: float,
        lon: float,
        owner: str = "",
        nonce: int = 0,
        fee: int = 0,
        amount: int = 0,
        payer: str = "",
    ):
        """Initialize the request."""
        self.lat = lat
        self.lon = lon
        self.owner = owner
        self.nonce = nonce
        self.fee = fee
        self.amount = amount
        self.payer = payer

    def to_dict(self) -> Dict[str, Any]:
        """Convert the request to a dictionary."""
        return {
            "lat": self.lat,
            "lon": self.lon,
            "owner": self.owner,
            "nonce": self.nonce,
            "fee": self.fee,
            "amount": self.amount,
            "payer": self.payer,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, AssertLocationRequest):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"AssertLocationRequest(lat={self.lat}, lon={self.lon}, nonce={self.nonce})"


def decode_assert_loc(data: bytes) -> AssertLocationRequest:
    """Decode a characteristic write into an AssertLocationRequest."""
    msg = AssertLocV1()
    try:
        msg.ParseFromString(bytes(data))
    except (ProtobufDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Invalid {MESSAGE_NAME} payload: {e}") from e

    return AssertLocationRequest(
        lat=msg.lat,
        lon=msg.lon,
        owner=msg.owner,
        nonce=msg.nonce,
        fee=msg.fee,
        amount=msg.amount,
        payer=msg.payer,
    )


def encode_assert_loc(request: AssertLocationRequest) -> bytes:
    """Encode an AssertLocationRequest to its wire form."""
    return AssertLocV1(**request.to_dict()).SerializeToString()
