from typing import List, Optional, Literal
from pydantic import BaseModel, Field

FieldType = Literal["identifier", "string", "integer", "float", "boolean", "date"]

class CanonicalField(BaseModel):
    name: str                  # wire name, e.g. "earnedPoints"
    attr: str                  # attribute on FixedCustomer, e.g. "earned_points"
    type: FieldType
    description: Optional[str] = None

    # Alternative column names, compared after key normalization
    synonyms: List[str] = Field(default_factory=list)

class CustomerSchema(BaseModel):
    name: str
    version: str
    fields: List[CanonicalField]

    def field_by_name(self, name: str) -> Optional[CanonicalField]:
        return next((f for f in self.fields if f.name == name), None)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def date_field_names(self) -> List[str]:
        return [f.name for f in self.fields if f.type == "date"]

# Canonical customer field set with the column names seen across backend revisions
CUSTOMER_SCHEMA = CustomerSchema(
    name="InsidersCustomer",
    version="1.0",
    fields=[
        CanonicalField(
            name="id",
            attr="id",
            type="identifier",
            description="Backend identifier, falls back to the row position",
            synonyms=["_id", "customerid", "cusid", "userid"],
        ),
        CanonicalField(
            name="displayId",
            attr="display_id",
            type="string",
            synonyms=["displayid", "memberid", "membershipid", "cardnumber"],
        ),
        CanonicalField(
            name="name",
            attr="name",
            type="string",
            synonyms=["cusname", "username", "customername", "fullname"],
        ),
        CanonicalField(
            name="phone",
            attr="phone",
            type="string",
            synonyms=["mobile", "phoneno", "phonenumber", "mobileno", "mobilenumber", "tel"],
        ),
        CanonicalField(
            name="email",
            attr="email",
            type="string",
            synonyms=["emailaddress", "mail"],
        ),
        CanonicalField(
            name="currentRank",
            attr="current_rank",
            type="string",
            synonyms=["rank", "tier", "currentrank", "loyaltytier"],
        ),
        CanonicalField(
            name="internalLoyaltyCustomerId",
            attr="internal_loyalty_customer_id",
            type="string",
            synonyms=["internalloyaltycustomerid", "loyaltycustomerid", "loyaltyid", "internalid"],
        ),
        CanonicalField(
            name="signUpDate",
            attr="sign_up_date",
            type="date",
            synonyms=["signupdate", "signup", "joindate", "joineddate", "createdat"],
        ),
        CanonicalField(
            name="lastPurchaseDate",
            attr="last_purchase_date",
            type="date",
            synonyms=["lastpurchasedate", "lastpurchase", "lastvisit", "lastvisitdate"],
        ),
        CanonicalField(
            name="startDate",
            attr="start_date",
            type="date",
            synonyms=["startdate", "start"],
        ),
        CanonicalField(
            name="endDate",
            attr="end_date",
            type="date",
            synonyms=["enddate", "end", "expirydate", "expires"],
        ),
        CanonicalField(
            name="earnedPoints",
            attr="earned_points",
            type="integer",
            synonyms=["points", "pointsearned", "earnedpoints", "loyaltypoints"],
        ),
        CanonicalField(
            name="totalVisits",
            attr="total_visits",
            type="integer",
            synonyms=["visits", "totalvisits", "visitcount"],
        ),
        CanonicalField(
            name="totalSpend",
            attr="total_spend",
            type="float",
            synonyms=["spend", "totalspend", "totalspent", "amountspent"],
        ),
        CanonicalField(
            name="isEmployee",
            attr="is_employee",
            type="boolean",
            synonyms=["isemployee", "employee", "staff"],
        ),
    ],
)